"""PDF re-serialization through PyPDF2."""

from nextasset.features.pdf.models import PdfOptimizeOptions, PdfOptimizeResult
from nextasset.features.pdf.optimizer import optimize_pdf, optimize_pdfs_in_folder

__all__ = [
    "PdfOptimizeOptions",
    "PdfOptimizeResult",
    "optimize_pdf",
    "optimize_pdfs_in_folder",
]
