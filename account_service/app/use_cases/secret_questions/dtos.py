from pydantic import BaseModel


class SecretQuestionInfo(BaseModel):
    """Catalog entry as returned to clients"""

    id: int
    question: str
