"""Infrastructure components for the virtual interviewer.

This module contains the low-level adapters behind the interview core:
- audio: microphone stream and sample conversions
- speech: Google Cloud text-to-speech and speech-to-text capabilities
- data: session export

Submodules are imported on demand so that the core and the export code do
not pull in PyAudio or the Google Cloud clients.
"""
