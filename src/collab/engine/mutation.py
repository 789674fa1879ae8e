"""Text mutation: progressive insertion and removal on the shared buffer.

Both routines are async generators. Each yielded value is the next full buffer
state; between yields the routine sleeps through the run's cancel token, so a
stopped run cannot be resumed into another batch. Batch size and jitter only
shape the intermediate states; the final state is always the same as the
atomic edit computed by ``apply_step``.
"""

import random
from typing import AsyncIterator, Iterable, Optional

from collab.core.time import CancelToken, PlaybackConfig
from collab.script.steps import DeleteStep, Step, TypeStep


def insert_batch_size(text: str, config: PlaybackConfig) -> int:
    return 2 if len(text) > config.long_text_threshold else 1


def delete_batch_size(span: int, config: PlaybackConfig) -> int:
    return 3 if span > config.long_delete_threshold else 2


def find_last(buffer: str, target: str) -> int:
    """Start index of the last occurrence of ``target``, or -1 (also for an empty target)."""
    if not target:
        return -1
    return buffer.rfind(target)


def remove_last(buffer: str, target: str) -> str:
    start = find_last(buffer, target)
    if start < 0:
        return buffer
    return buffer[:start] + buffer[start + len(target):]


def apply_step(buffer: str, step: Step) -> str:
    """Atomic effect of one step on the buffer; chat steps leave it unchanged."""
    if isinstance(step, TypeStep):
        return buffer + step.text
    if isinstance(step, DeleteStep):
        return remove_last(buffer, step.delete_text)
    return buffer


def replay(steps: Iterable[Step], buffer: str = "") -> str:
    for step in steps:
        buffer = apply_step(buffer, step)
    return buffer


async def progressive_insert(
    text: str,
    base: str,
    config: PlaybackConfig,
    token: CancelToken,
    rng: Optional[random.Random] = None,
) -> AsyncIterator[str]:
    """Reveal ``text`` onto the end of ``base`` a batch at a time, with jittered pauses."""
    if not text:
        return
    rng = rng or random.Random()
    size = insert_batch_size(text, config)
    shown = 0
    while shown < len(text):
        shown = min(len(text), shown + size)
        yield base + text[:shown]
        if shown < len(text):
            jitter = rng.uniform(-config.type_jitter_ms, config.type_jitter_ms)
            await token.sleep(config.seconds(config.type_delay_ms + jitter))


async def progressive_remove(
    delete_text: str,
    base: str,
    config: PlaybackConfig,
    token: CancelToken,
) -> AsyncIterator[str]:
    """Erase the last occurrence of ``delete_text`` from its end backward.

    Yields nothing when the text is empty or absent, leaving ``base`` as is.
    """
    start = find_last(base, delete_text)
    if start < 0:
        return
    end = start + len(delete_text)
    size = delete_batch_size(end - start, config)
    cut = end
    while cut > start:
        cut = max(start, cut - size)
        yield base[:cut] + base[end:]
        if cut > start:
            await token.sleep(config.seconds(config.delete_delay_ms))
