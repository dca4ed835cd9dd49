from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """Inbound chat message in our domain model."""
    chat_id: int
    user_id: int | None = None
    chat_type: str = "private"
    text: str = ""
    caption: str = ""
    has_image: bool = False
    image_file_id: str | None = None


# --- Telegram Bot API update models ---


class TelegramChat(BaseModel):
    id: int
    type: str = "private"


class TelegramUser(BaseModel):
    id: int
    username: str | None = None


class TelegramPhotoSize(BaseModel):
    file_id: str
    width: int = 0
    height: int = 0


class TelegramDocument(BaseModel):
    file_id: str
    mime_type: str | None = None
    file_name: str | None = None


class TelegramMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message_id: int
    chat: TelegramChat
    sender: TelegramUser | None = Field(default=None, alias="from")
    text: str | None = None
    caption: str | None = None
    photo: list[TelegramPhotoSize] = []
    document: TelegramDocument | None = None


class TelegramUpdate(BaseModel):
    """Pydantic model for a Telegram `Update` carrying a message."""
    update_id: int
    message: TelegramMessage


def _image_file_id(message: TelegramMessage) -> str | None:
    """Largest photo wins; image or PDF documents are accepted as payment proofs."""
    if message.photo:
        return message.photo[-1].file_id
    doc = message.document
    if doc and doc.mime_type and (doc.mime_type.startswith("image/") or doc.mime_type == "application/pdf"):
        return doc.file_id
    return None


def parse_telegram_update(update: TelegramUpdate) -> ChatMessage:
    """Convert a validated Telegram update into our domain model."""
    message = update.message
    file_id = _image_file_id(message)
    return ChatMessage(
        chat_id=message.chat.id,
        user_id=message.sender.id if message.sender else None,
        chat_type=message.chat.type,
        text=message.text or "",
        caption=message.caption or "",
        has_image=file_id is not None,
        image_file_id=file_id,
    )
