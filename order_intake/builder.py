"""IntakeWorkflowBuilder: wires services and nodes based on AppConfig."""
from order_intake.config import AppConfig
from order_intake.nodes.classify import ClassifyNode
from order_intake.nodes.extract_amount import ExtractAmountNode
from order_intake.nodes.parse import ParseNode
from order_intake.nodes.reconcile import ReconcileNode
from order_intake.nodes.reply import ReplyNode
from order_intake.nodes.report import ReportNode
from order_intake.nodes.validate import ValidateNode
from order_intake.services.amounts.pipeline import AmountExtractionPipeline, ExtractionOptions
from order_intake.services.message_store.base import MessageStore
from order_intake.services.message_store.local import LocalMessageStore
from order_intake.services.ocr.base import OCRService
from order_intake.services.ocr.tesseract import TesseractOCR
from order_intake.services.tools.base import ToolManager
from order_intake.services.tools.mock import MockToolManager
from order_intake.workflow import build_graph


class IntakeWorkflowBuilder:
    """Builds the intake graph by wiring services and nodes from config."""

    def __init__(
        self,
        config: AppConfig,
        ocr: OCRService | None = None,
        tool_manager: ToolManager | None = None,
    ):
        self.config = config

        self._ocr = ocr or self._build_ocr()
        self._tool_manager = tool_manager or self._build_tool_manager()
        self._message_store = self._build_message_store()

    @property
    def tool_manager(self) -> ToolManager:
        return self._tool_manager

    @property
    def message_store(self) -> MessageStore:
        return self._message_store

    def extraction_options(self) -> ExtractionOptions:
        return ExtractionOptions(
            preprocess=self.config.ocr_preprocess,
            debug_save=self.config.ocr_debug_save,
            debug_dir=self.config.ocr_debug_dir,
            lang=self.config.ocr_lang,
            min_amount=self.config.min_amount,
            max_amount=self.config.max_amount,
            require_confirmation=self.config.require_confirmation,
            confidence_threshold=self.config.confidence_threshold,
        )

    def build(self):
        """Build and return a compiled LangGraph workflow."""
        pipeline = AmountExtractionPipeline(self._ocr, self.extraction_options())
        nodes = {
            "classify": ClassifyNode(),
            "parse": ParseNode(),
            "validate": ValidateNode(),
            "reconcile": ReconcileNode(tools=self._tool_manager),
            "extract_amount": ExtractAmountNode(pipeline=pipeline),
            "reply": ReplyNode(tools=self._tool_manager, message_store=self._message_store),
            "report": ReportNode(),
        }
        return build_graph(nodes)

    def _build_ocr(self) -> OCRService:
        if self.config.ocr_engine == "tesseract":
            return TesseractOCR(lang=self.config.ocr_lang)
        raise ValueError(f"Unknown OCR engine: {self.config.ocr_engine}")

    def _build_tool_manager(self) -> ToolManager:
        if self.config.tool_manager == "mock":
            return MockToolManager()
        raise ValueError(f"Unknown tool manager: {self.config.tool_manager}")

    def _build_message_store(self) -> MessageStore:
        if self.config.message_store == "local":
            return LocalMessageStore(
                templates_dir=self.config.templates_dir,
                language=self.config.message_language,
                fallback_language=self.config.message_fallback_language,
            )
        raise ValueError(f"Unknown message store: {self.config.message_store}")
