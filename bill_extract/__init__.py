"""Bill amount extraction service.

Reads bill and receipt images with Tesseract OCR and asks Gemini to
structure the recognized text into total, paid and due amounts, caching
results by content fingerprint.
"""

__version__ = "1.0.0"
