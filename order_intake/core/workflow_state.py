from typing import TypedDict


class IntakeState(TypedDict, total=False):
    # --- Input (populated from the chat message) ---
    chat_id: int
    message_text: str
    image_bytes: bytes | None

    # --- Classification ---
    message_kind: str                    # "order" | "payment" | "other"
    detected_format: str | None          # "v1" | "v2" | None

    # --- Order parsing ---
    draft_order: dict | None             # DraftOrder.model_dump()
    parse_error: dict | None             # {"field": ..., "message": ...}

    # --- Validation ---
    validation_errors: list[str]

    # --- Price-list reconciliation ---
    order_total: int

    # --- Payment evidence ---
    amount_result: dict | None           # ExtractionResult.model_dump()

    # --- Actions & tracking ---
    reply_sent: bool
    reply_text: str
    error_message: str
    trajectory: list[str]                # node names visited

    # --- Final ---
    final_status: str                    # "awaiting_confirmation" | "incomplete" | "rejected" | "skipped" | "error"
