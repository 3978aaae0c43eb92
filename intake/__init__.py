"""Lead and business-diagnosis intake API."""
