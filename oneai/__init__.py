# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
OneAI - capability gateway

Routes chat, image, video, speech, music and transcription requests to the
configured AI vendor and returns one canonical response envelope, degrading to
labelled demo content where the product allows it.
"""

__version__ = "1.0.0"
__author__ = "OneAI Team"
