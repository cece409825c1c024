from fiveby_client.voice.announcer import QuestionAnnouncer
from fiveby_client.voice.stt import (
    ListeningHandle,
    RecognitionEngine,
    RecognitionResult,
    SpeechRecognitionService,
    SttError,
    SttErrorCode,
    SttStatus,
)
from fiveby_client.voice.tts import SpeechSynthesisError, SpeechSynthesisService, SynthesisEngine

__all__ = [
    "ListeningHandle",
    "QuestionAnnouncer",
    "RecognitionEngine",
    "RecognitionResult",
    "SpeechRecognitionService",
    "SpeechSynthesisError",
    "SpeechSynthesisService",
    "SttError",
    "SttErrorCode",
    "SttStatus",
    "SynthesisEngine",
]
