"""Card parsing, hand bucketing, and rule resolution."""
