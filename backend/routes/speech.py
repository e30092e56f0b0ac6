"""Speech API: one audio clip per sentence, null where synthesis failed."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from actdiary.errors import ValidationError
from actdiary.work import TextGenerator
from backend.deps import get_generator

router = APIRouter()

MAX_SENTENCES = 20


class SpeechRequest(BaseModel):
    sentences: list[str] = Field(default_factory=list)


class SpeechResponse(BaseModel):
    ok: bool = True
    audios: list[str | None] = Field(default_factory=list)


@router.post("/speech", response_model=SpeechResponse, summary="Synthesize sentences")
def synthesize(body: SpeechRequest, generator: TextGenerator = Depends(get_generator)):
    sentences = [s for s in body.sentences if s.strip()]
    if not sentences or len(sentences) != len(body.sentences):
        raise ValidationError("empty_sentence")
    if len(sentences) > MAX_SENTENCES:
        raise ValidationError("too_many_sentences")
    return SpeechResponse(audios=generator.speak(sentences))
