"""Receipt OCR text parsing and formatting."""
