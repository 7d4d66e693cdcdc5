"""Document Classification and Extraction System.

Acquires OCR text from scanned images and multi-page PDFs with Tesseract,
classifies the document as an invoice, ID card, certificate or form,
and extracts a structured set of type-specific fields.
"""
