"""Speech-to-text and text-to-speech capabilities backed by Google Cloud."""

from .credentials import load_credentials


# Lazy imports: both adapters need PyAudio
def __getattr__(name):
    if name == "GoogleSpeechOutput":
        from .tts import GoogleSpeechOutput
        return GoogleSpeechOutput
    if name == "GoogleSpeechInput":
        from .stt import GoogleSpeechInput
        return GoogleSpeechInput
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = ["GoogleSpeechOutput", "GoogleSpeechInput", "load_credentials"]
