from models.schemas.base import SchemaModel


class HealthResponse(SchemaModel):
    status: str = "ok"
    gemini_configured: bool = False


class QuickEnhanceResponse(SchemaModel):
    enhanced: str
    tokens_used: int = 0
