PROGRAM_NAME = "phonetext"
VERSION = "0.3.0"

# Characters the chunker treats as punctuation; runs of these never reach the backend.
PUNCTUATION = ';:,.!?¡¿—…"«»“”(){}[]'

SUPPORTED_VOICES = (
    "af_heart",
    "af_bella",
    "af_nicole",
    "af_sarah",
    "af_sky",
    "am_adam",
    "am_michael",
    "bf_emma",
    "bf_isabella",
    "bm_george",
    "bm_lewis",
)
