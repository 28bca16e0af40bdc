"""
Module for the Dynamic Entropy Pool.
This pool maintains a buffer of random bytes, periodically topped up from a
random source. Bytes handed out are removed from the pool so no two callers
ever receive the same entropy. It is designed to be thread-safe, which makes
PooledEntropySourceProvider safe to share between builders.
"""
import logging
import threading
import time
from typing import Optional

from sp800_random.errors import EntropyUnavailable
from .entropy_source import EntropySource, EntropySourceProvider
from .random_source import RandomSourceInterface

logger = logging.getLogger(__name__)

DEFAULT_POOL_MAX_SIZE_BYTES = 1024
DEFAULT_REFRESH_INTERVAL_SEC = 3.0


class EntropyPool:
    """
    Maintains a pool of entropy that is periodically refilled from a random source.
    The pool is thread-safe for access.
    """
    def __init__(self,
                 random_source: RandomSourceInterface,
                 max_size_bytes: int = DEFAULT_POOL_MAX_SIZE_BYTES,
                 refresh_interval_sec: float = DEFAULT_REFRESH_INTERVAL_SEC):
        """
        Initializes the entropy pool.

        Args:
            random_source: An object conforming to RandomSourceInterface to source entropy.
            max_size_bytes: The maximum size of the entropy pool in bytes.
            refresh_interval_sec: How often the pool should be topped up.
        """
        if not isinstance(random_source, RandomSourceInterface):
            raise TypeError("random_source must be an instance of RandomSourceInterface.")
        if not isinstance(max_size_bytes, int) or max_size_bytes <= 0:
            raise ValueError("max_size_bytes must be a positive integer.")
        if not isinstance(refresh_interval_sec, (int, float)) or refresh_interval_sec <= 0:
            raise ValueError("refresh_interval_sec must be a positive number.")

        self.random_source = random_source
        self.max_size = max_size_bytes
        self.refresh_interval = refresh_interval_sec

        self._pool = bytearray()
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._is_running = False

        self._refresh_thread = threading.Thread(target=self._maintain_pool, daemon=True)

    def start(self):
        """Fills the pool and starts the background refresh thread if not already running."""
        if not self._is_running:
            self._top_up()
            self._is_running = True
            self._stop_event.clear()
            if not self._refresh_thread.is_alive():
                self._refresh_thread = threading.Thread(target=self._maintain_pool, daemon=True)
            self._refresh_thread.start()
            logger.debug("[EntropyPool] Refresh thread started (max %d bytes, every %.1fs).",
                         self.max_size, self.refresh_interval)

    def _top_up(self):
        """
        Draws enough bytes from the random source to fill the pool back to max_size.
        Errors from the random source propagate.
        """
        with self._lock:
            missing = self.max_size - len(self._pool)
            if missing <= 0:
                return
            new_entropy = self.random_source.get_random_bytes(missing)
            self._pool.extend(new_entropy)

    def _maintain_pool(self):
        """Background thread's main loop to periodically top up the entropy pool."""
        while not self._stop_event.wait(self.refresh_interval):
            try:
                self._top_up()
            except (EntropyUnavailable, OSError) as e:
                # The pool just stays short; get_entropy() reports the shortfall to its caller.
                logger.error("[EntropyPool] Could not refresh entropy from random source: %s", e)

    def available(self) -> int:
        """Number of bytes currently held in the pool."""
        with self._lock:
            return len(self._pool)

    def get_entropy(self, num_bytes: int) -> bytes:
        """
        Removes and returns num_bytes of entropy from the pool.

        If the pool holds too little, the remainder is drawn directly from the
        random source.

        Args:
            num_bytes: The desired number of bytes of entropy.

        Returns:
            A bytes object of exactly num_bytes.

        Raises:
            EntropyUnavailable: If the random source cannot make up a shortfall.
        """
        if not isinstance(num_bytes, int):
            raise TypeError("Number of bytes must be an integer.")
        if num_bytes < 0:
            raise ValueError("Number of bytes must be non-negative.")
        if num_bytes == 0:
            return b""

        with self._lock:
            taken = bytes(self._pool[:num_bytes])
            del self._pool[:num_bytes]

            shortfall = num_bytes - len(taken)
            if shortfall > 0:
                extra = self.random_source.get_random_bytes(shortfall)
                if extra is None or len(extra) < shortfall:
                    raise EntropyUnavailable(
                        f"Entropy pool exhausted: {num_bytes} bytes requested, {len(taken)} available.")
                taken += extra
        return taken

    def stop(self):
        """Stops the background refresh thread gracefully."""
        if self._is_running:
            self._stop_event.set()
            if self._refresh_thread.is_alive():
                self._refresh_thread.join(timeout=self.refresh_interval * 2)
                if self._refresh_thread.is_alive():
                    logger.warning("[EntropyPool] Refresh thread did not terminate in time.")
            self._is_running = False

    def __enter__(self):
        """Context management: enter."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context management: exit."""
        self.stop()


class _PooledEntropySource(EntropySource):
    def __init__(self, pool: EntropyPool, bits_required: int):
        self._pool = pool
        self._bits_required = bits_required

    def is_prediction_resistant(self) -> bool:
        # Pool bytes are consumed on read, so every call is fresh.
        return True

    def get_entropy(self) -> bytes:
        return self._pool.get_entropy((self._bits_required + 7) // 8)

    def entropy_size(self) -> int:
        return self._bits_required


class PooledEntropySourceProvider(EntropySourceProvider):
    """An EntropySourceProvider drawing from a shared EntropyPool."""

    def __init__(self, pool: EntropyPool):
        if not isinstance(pool, EntropyPool):
            raise TypeError("pool must be an instance of EntropyPool.")
        self.pool = pool

    def get(self, bits_required: int) -> EntropySource:
        if not isinstance(bits_required, int):
            raise TypeError("bits_required must be an integer.")
        if bits_required <= 0:
            raise ValueError("bits_required must be a positive integer.")
        return _PooledEntropySource(self.pool, bits_required)


if __name__ == '__main__':
    from .random_source import OsUrandomRandomSource
    logging.basicConfig(level=logging.DEBUG)
    print("\n--- EntropyPool Demonstration ---")

    with EntropyPool(random_source=OsUrandomRandomSource(), max_size_bytes=128, refresh_interval_sec=1.0) as pool:
        for i in range(3):
            chunk = pool.get_entropy(48)
            print(f"Sample {i+1} (size {len(chunk)}): {chunk.hex()}  pool now {pool.available()}B")
        time.sleep(1.1)
        print(f"After refresh the pool holds {pool.available()}B")
