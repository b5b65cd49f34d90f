"""
Critic Module - AI Critique of the Drawing
==========================================
Sends a PNG snapshot of the permanent drawing layer to a vision-language
model and returns a short commentary. Runs off the frame loop on a
background thread; failures never touch the drawing state and are turned
into a fallback message.

Backends:
- Hugging Face Inference (chat completion with an image attachment)
- Mock critic for offline use
"""

import base64
import io
import os
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import numpy as np
from huggingface_hub import InferenceClient
from PIL import Image


CRITIQUE_PROMPT = (
    "Examine this digital smartboard drawing. List any identified objects or "
    "symbols, and offer a short, sophisticated, witty critique of the artistic style."
)

FALLBACK_MESSAGE = (
    "Vision Intelligence experienced a hiccup. Check your board and try again."
)


@dataclass
class CritiqueResult:
    """Result of one critique request."""
    success: bool
    text: str
    error: Optional[str] = None
    elapsed: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)


class SketchCritic:
    """
    AI critic backed by the Hugging Face Inference API.

    A request can be cancelled at any time; a cancelled request's result is
    discarded when it eventually arrives.
    """

    DEFAULT_MODEL = "Qwen/Qwen2.5-VL-7B-Instruct"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_id: str = DEFAULT_MODEL,
        provider: Optional[str] = None,
        max_tokens: int = 300
    ):
        """
        Initialize the critic.

        Args:
            api_key: Hugging Face token (HF_TOKEN / HF_API_KEY if None)
            model_id: Vision-language model to query
            provider: Optional inference provider name
            max_tokens: Maximum length of the answer
        """
        self.api_key = api_key or os.environ.get('HF_TOKEN', '') or os.environ.get('HF_API_KEY', '')
        self.model_id = model_id
        self.max_tokens = max_tokens

        client_kwargs = {'api_key': self.api_key}
        if provider:
            client_kwargs['provider'] = provider
        self._client = InferenceClient(**client_kwargs)
        print(f"[INFO] Using Hugging Face Inference API ({self.model_id})")

        self._init_state()

    def _init_state(self):
        self._is_analyzing = False
        self._request_id = 0
        self._thread: Optional[threading.Thread] = None
        self._last_result: Optional[CritiqueResult] = None
        self._on_complete: Optional[Callable[[CritiqueResult], None]] = None

    def critique(self, snapshot_png: bytes, async_mode: bool = True) -> Optional[CritiqueResult]:
        """
        Critique a drawing snapshot.

        Args:
            snapshot_png: PNG-encoded drawing
            async_mode: If True, run in a background thread

        Returns:
            CritiqueResult if sync mode, None if async mode
        """
        if self._is_analyzing:
            return CritiqueResult(success=False, text=FALLBACK_MESSAGE,
                                  error="Analysis already in progress")

        if not async_mode:
            return self._critique_sync(snapshot_png)

        self._is_analyzing = True
        self._request_id += 1
        self._thread = threading.Thread(
            target=self._critique_async,
            args=(snapshot_png, self._request_id),
            daemon=True
        )
        self._thread.start()
        return None

    def _critique_sync(self, snapshot_png: bytes) -> CritiqueResult:
        start_time = time.time()
        try:
            text = self._ask(snapshot_png)
            return CritiqueResult(
                success=True,
                text=text,
                elapsed=time.time() - start_time,
                metadata={'model': self.model_id}
            )
        except Exception as e:
            print(f"[WARNING] AI analysis failed: {e}")
            return CritiqueResult(
                success=False,
                text=FALLBACK_MESSAGE,
                error=str(e),
                elapsed=time.time() - start_time
            )

    def _critique_async(self, snapshot_png: bytes, request_id: int):
        result = self._critique_sync(snapshot_png)

        # Disposed while the request was in flight
        if request_id != self._request_id:
            return

        self._last_result = result
        self._is_analyzing = False
        if self._on_complete:
            self._on_complete(result)

    def _ask(self, snapshot_png: bytes) -> str:
        """Send the snapshot and prompt to the model."""
        data_url = "data:image/png;base64," + base64.b64encode(snapshot_png).decode('utf-8')
        messages = [{
            'role': 'user',
            'content': [
                {'type': 'text', 'text': CRITIQUE_PROMPT},
                {'type': 'image_url', 'image_url': {'url': data_url}},
            ],
        }]

        response = self._client.chat_completion(
            messages=messages,
            model=self.model_id,
            max_tokens=self.max_tokens,
        )
        text = response.choices[0].message.content
        if not text:
            raise ValueError("Empty response from model")
        return text.strip()

    def set_on_complete(self, callback: Callable[[CritiqueResult], None]):
        """Set callback for when a critique completes."""
        self._on_complete = callback

    def is_analyzing(self) -> bool:
        return self._is_analyzing

    def get_last_result(self) -> Optional[CritiqueResult]:
        return self._last_result

    def cancel(self):
        """Dispose of the request in flight; its result will be ignored."""
        self._request_id += 1
        self._is_analyzing = False


class MockSketchCritic(SketchCritic):
    """
    Offline critic for testing without API access.
    Comments on how much of the board is covered in ink.
    """

    INK_THRESHOLD = 40  # Grayscale level separating ink from board

    def __init__(self, delay: float = 0.5):
        self.model_id = 'mock'
        self.delay = delay
        self._init_state()

    def _ask(self, snapshot_png: bytes) -> str:
        time.sleep(self.delay)

        gray = np.array(Image.open(io.BytesIO(snapshot_png)).convert('L'))
        coverage = float(np.count_nonzero(gray > self.INK_THRESHOLD)) / gray.size

        if coverage == 0:
            return "An empty board: a bold minimalist statement, or perhaps just shyness."
        if coverage < 0.02:
            return (f"A few confident strokes ({coverage:.1%} of the board). "
                    "Restraint this severe borders on haiku.")
        return (f"Ink covers {coverage:.1%} of the board. An energetic composition "
                "that clearly refuses to be contained by mere geometry.")


def create_critic(use_mock: bool = False, api_key: Optional[str] = None) -> SketchCritic:
    """
    Factory function to create a critic.

    Args:
        use_mock: If True, use the offline critic
        api_key: Hugging Face token (HF_TOKEN)

    Environment Variables:
        HF_TOKEN: Hugging Face API token (preferred)
        HF_API_KEY: Alternative name for HF token
    """
    if use_mock:
        return MockSketchCritic()

    key = api_key or os.environ.get('HF_TOKEN', '') or os.environ.get('HF_API_KEY', '')
    if not key:
        print("[INFO] No HF_TOKEN found. Using mock critic.")
        print("[INFO] Set HF_TOKEN environment variable for real AI analysis.")
        return MockSketchCritic()

    return SketchCritic(api_key=key)
