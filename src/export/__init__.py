"""Export module: slide deck compilation, PPTX/PDF rendering and packaging."""

from src.export.packager import export_filename, package
from src.export.palette import DEFAULT_PALETTE, Palette
from src.export.pdf_report import PDFReportRenderer
from src.export.pptx_deck import PptxDeckRenderer
from src.export.slides_deck import DECK_VERSION, SlideDeckCompiler

__all__ = [
    "DECK_VERSION",
    "DEFAULT_PALETTE",
    "PDFReportRenderer",
    "Palette",
    "PptxDeckRenderer",
    "SlideDeckCompiler",
    "export_filename",
    "package",
]
