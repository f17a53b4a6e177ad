"""Field descriptors, validation rules, errors and configuration for Universal Form."""
