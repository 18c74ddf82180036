"""Engine services: normalization, extraction, classification and friends."""
