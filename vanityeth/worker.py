"""
Multiprocessing worker for vanity address search.

IMPORTANT: This module must contain only top-level importable functions.
On macOS/Windows, multiprocessing uses 'spawn' which requires worker
targets to be importable by name from a module.
"""

import logging
import signal

from vanityeth.core import KeyGenerationError, Result

logger = logging.getLogger(__name__)


def search_worker(
    config,
    keygen,
    channel,
    stats,
    cancel,
):
    """Worker process: generate keys in a tight loop and publish matches.

    Runs until cancel is set or stats.found reaches config.count.

    Args:
        config: Config (matcher is built locally from it).
        keygen: Picklable callable(checksum) -> (private_key_bytes, address).
        channel: ResultChannel to publish the first config.count matches on.
        stats: Stats shared with the parent and the other workers.
        cancel: multiprocessing.Event, the shared stop signal.
    """
    # Ctrl-C goes to the whole process group; the parent owns cancellation
    signal.signal(signal.SIGINT, signal.SIG_IGN)

    matcher = config.build_matcher()
    published = 0

    try:
        while not cancel.is_set():
            if stats.found >= config.count:
                break

            try:
                private_key, address = keygen(config.case_sensitive)
            except KeyGenerationError as e:
                stats.add_failed()
                logger.debug("key generation failed, retrying: %s", e)
                continue

            stats.add_total()

            if not matcher(address):
                continue

            n = stats.add_found()
            if n > config.count:
                # another worker already filled the last slot
                continue

            result = Result(address=address, private_key=private_key.hex())
            if not channel.put(result, cancel):
                break
            published += 1
    finally:
        logger.debug("worker exiting, published %d result(s)", published)
