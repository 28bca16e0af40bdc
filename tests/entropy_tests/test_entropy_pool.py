import unittest
import threading
import time
from unittest.mock import MagicMock

from entropy_sources.random_source import MockRandomSource
from entropy_sources.entropy_pool import EntropyPool, PooledEntropySourceProvider, DEFAULT_POOL_MAX_SIZE_BYTES
from sp800_random.errors import EntropyUnavailable

class TestEntropyPool(unittest.TestCase):
        def test_pool_initialization_and_basic_get(self):
            mock_source = MockRandomSource(seed_byte=0x00)
            with EntropyPool(random_source=mock_source, max_size_bytes=64, refresh_interval_sec=10.0) as pool:
                self.assertEqual(pool.available(), 64)
                entropy = pool.get_entropy(16)
                self.assertEqual(entropy, bytes(range(16)))
                self.assertEqual(pool.available(), 48)

                self.assertEqual(pool.get_entropy(0), b"")
                with self.assertRaises(ValueError):
                    pool.get_entropy(-5)
                with self.assertRaises(TypeError):
                    pool.get_entropy("abc") # type: ignore

        def test_bytes_are_never_handed_out_twice(self):
            with EntropyPool(random_source=MockRandomSource(seed_byte=0x00), max_size_bytes=64,
                             refresh_interval_sec=10.0) as pool:
                first = pool.get_entropy(32)
                second = pool.get_entropy(32)
                self.assertNotEqual(first, second)
                self.assertEqual(second, bytes(range(32, 64)))

        def test_shortfall_is_drawn_from_source(self):
            mock_source = MockRandomSource(seed_byte=0x00)
            with EntropyPool(random_source=mock_source, max_size_bytes=16, refresh_interval_sec=10.0) as pool:
                entropy = pool.get_entropy(40)
                self.assertEqual(entropy, bytes(range(40)))
                self.assertEqual(pool.available(), 0)

        def test_pool_refresh(self):
            refresh_interval = 0.1
            with EntropyPool(random_source=MockRandomSource(), max_size_bytes=32,
                             refresh_interval_sec=refresh_interval) as pool:
                pool.get_entropy(32)
                time.sleep(refresh_interval * 4)
                self.assertEqual(pool.available(), 32, "Entropy pool was not topped up.")

        def test_failing_source_surfaces_entropy_unavailable(self):
            failing = MockRandomSource()
            with EntropyPool(random_source=failing, max_size_bytes=16, refresh_interval_sec=0.1) as pool:
                failing.get_random_bytes = MagicMock(side_effect=EntropyUnavailable("Simulated source failure"))
                pool.get_entropy(16)
                with self.assertRaises(EntropyUnavailable):
                    pool.get_entropy(16)
                # The refresh thread keeps running after failed refreshes.
                time.sleep(0.25)
                self.assertTrue(pool._refresh_thread.is_alive())

        def test_concurrent_consumers_get_distinct_bytes(self):
            results = []
            lock = threading.Lock()
            with EntropyPool(random_source=MockRandomSource(seed_byte=0x00), max_size_bytes=256,
                             refresh_interval_sec=10.0) as pool:
                def consume():
                    chunk = pool.get_entropy(8)
                    with lock:
                        results.append(chunk)
                threads = [threading.Thread(target=consume) for _ in range(16)]
                for t in threads:
                    t.start()
                for t in threads:
                    t.join()
            self.assertEqual(len(set(results)), 16)

        def test_init_invalid_params(self):
            mock_source = MockRandomSource()
            with self.assertRaises(TypeError):
                EntropyPool(random_source="not_a_source") # type: ignore
            with self.assertRaises(ValueError):
                EntropyPool(random_source=mock_source, max_size_bytes=0)
            with self.assertRaises(ValueError):
                EntropyPool(random_source=mock_source, refresh_interval_sec=0)
            self.assertEqual(EntropyPool(random_source=mock_source).max_size, DEFAULT_POOL_MAX_SIZE_BYTES)


class TestPooledEntropySourceProvider(unittest.TestCase):
        def test_sources_draw_fresh_bytes(self):
            with EntropyPool(random_source=MockRandomSource(seed_byte=0x00), max_size_bytes=128,
                             refresh_interval_sec=10.0) as pool:
                provider = PooledEntropySourceProvider(pool)
                source = provider.get(256)
                self.assertTrue(source.is_prediction_resistant())
                self.assertEqual(source.entropy_size(), 256)
                first = source.get_entropy()
                second = source.get_entropy()
                self.assertEqual(len(first), 32)
                self.assertNotEqual(first, second)

        def test_invalid_arguments(self):
            with self.assertRaises(TypeError):
                PooledEntropySourceProvider("not a pool") # type: ignore
            provider = PooledEntropySourceProvider(EntropyPool(random_source=MockRandomSource()))
            with self.assertRaises(ValueError):
                provider.get(-8)


if __name__ == '__main__':
        unittest.main()
