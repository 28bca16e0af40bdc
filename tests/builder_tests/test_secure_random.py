import unittest

from drbg_mechanisms.base_drbg import SP80090DRBG
from entropy_sources.entropy_source import BasicEntropySourceProvider
from entropy_sources.random_source import MockRandomSource
from sp800_random.errors import EntropyUnavailable, MechanismFault
from sp800_random.secure_random import SP800SecureRandom


class CountingDRBG(SP80090DRBG):
    """Minimal mechanism that records every request and reseed it sees."""
    def __init__(self, entropy_source, reseed_interval=SP80090DRBG.RESEED_MAX):
        super().__init__(entropy_source, 128, 256)
        self.reseeds = 0
        self.reseed_inputs = []
        self.requests = []
        self._instantiate(None, None)
        self.reseed_interval = reseed_interval

    @property
    def block_size(self):
        return 128

    def _instantiate_algorithm(self, entropy, nonce, personalization_string):
        self._reseed_counter = 1

    def _reseed_algorithm(self, entropy, additional_input):
        self.reseeds += 1
        self.reseed_inputs.append(additional_input)
        self._reseed_counter = 1

    def _generate_algorithm(self, num_bytes, additional_input):
        self.requests.append((num_bytes, additional_input))
        self._reseed_counter += 1
        return bytes([self._reseed_counter % 256]) * num_bytes


class StuckDRBG(CountingDRBG):
    """Always reports that a reseed is needed."""
    def generate(self, num_bytes, additional_input=None, prediction_resistant=False):
        return None


class BrokenDRBG(CountingDRBG):
    """Fails once inside the generate algorithm, as Dual EC does on reaching the point at infinity."""
    failed = False

    def _generate_algorithm(self, num_bytes, additional_input):
        if not self.failed:
            self.failed = True
            raise MechanismFault("Simulated point at infinity")
        return super()._generate_algorithm(num_bytes, additional_input)


class BrokenReseedDRBG(CountingDRBG):
    def _reseed_algorithm(self, entropy, additional_input):
        raise MechanismFault("Simulated reseed failure")


def entropy_source(random_source=None):
    return BasicEntropySourceProvider(random_source or MockRandomSource(), False).get(128)


class TestReseedPolicy(unittest.TestCase):
    def test_reseed_only_when_interval_exhausted(self):
        for calls, expected_reseeds in [(3, 0), (4, 1), (7, 2)]:
            with self.subTest(calls=calls):
                drbg = CountingDRBG(entropy_source(), reseed_interval=3)
                generator = SP800SecureRandom(None, entropy_source(), drbg, False)
                for _ in range(calls):
                    self.assertEqual(len(generator.generate_bytes(8)), 8)
                self.assertEqual(drbg.reseeds, expected_reseeds)

    def test_prediction_resistant_generator_reseeds_each_request(self):
        drbg = CountingDRBG(entropy_source())
        generator = SP800SecureRandom(None, entropy_source(), drbg, True)
        for _ in range(5):
            generator.generate_bytes(8)
        self.assertEqual(drbg.reseeds, 5)

    def test_stuck_mechanism_faults_and_stays_faulted(self):
        generator = SP800SecureRandom(None, entropy_source(), StuckDRBG(entropy_source()), False,
                                      algorithm="STUCK")
        with self.assertRaises(MechanismFault):
            generator.generate_bytes(8)
        with self.assertRaises(MechanismFault):
            generator.generate_bytes(8)
        with self.assertRaises(MechanismFault):
            generator.reseed()

    def test_mechanism_fault_during_generate_poisons_generator(self):
        drbg = BrokenDRBG(entropy_source())
        generator = SP800SecureRandom(None, entropy_source(), drbg, False)
        with self.assertRaises(MechanismFault):
            generator.generate_bytes(8)
        # The mechanism would answer now, but the generator must not ask it again.
        with self.assertRaises(MechanismFault):
            generator.generate_bytes(8)
        with self.assertRaises(MechanismFault):
            generator.reseed()
        self.assertEqual(drbg.requests, [])

    def test_mechanism_fault_during_reseed_poisons_generator(self):
        generator = SP800SecureRandom(None, entropy_source(), BrokenReseedDRBG(entropy_source()), False)
        with self.assertRaises(MechanismFault):
            generator.reseed(b"caller")
        with self.assertRaises(MechanismFault):
            generator.generate_bytes(8)

    def test_entropy_failure_does_not_poison_generator(self):
        random_source = MockRandomSource()
        source = entropy_source(random_source)
        drbg = CountingDRBG(source, reseed_interval=1)
        generator = SP800SecureRandom(None, source, drbg, False)
        generator.generate_bytes(8)

        original = random_source.get_random_bytes
        random_source.get_random_bytes = lambda num_bytes: b""
        with self.assertRaises(EntropyUnavailable):
            generator.generate_bytes(8)
        random_source.get_random_bytes = original
        self.assertEqual(len(generator.generate_bytes(8)), 8)


class TestGenerateBytes(unittest.TestCase):
    def test_large_requests_are_split(self):
        drbg = CountingDRBG(entropy_source())
        drbg.MAX_BITS_REQUEST = 64
        generator = SP800SecureRandom(None, entropy_source(), drbg, False)
        self.assertEqual(len(generator.generate_bytes(20, b"extra")), 20)
        self.assertEqual(drbg.requests, [(8, b"extra"), (8, b""), (4, b"")])

    def test_zero_bytes(self):
        drbg = CountingDRBG(entropy_source())
        generator = SP800SecureRandom(None, entropy_source(), drbg, False)
        self.assertEqual(generator.generate_bytes(0), b"")
        self.assertEqual(drbg.requests, [])

    def test_invalid_counts(self):
        generator = SP800SecureRandom(None, entropy_source(), CountingDRBG(entropy_source()), False)
        with self.assertRaises(ValueError):
            generator.generate_bytes(-1)
        with self.assertRaises(TypeError):
            generator.generate_bytes(2.5) # type: ignore

    def test_next_bytes_fills_buffer(self):
        generator = SP800SecureRandom(None, entropy_source(), CountingDRBG(entropy_source()), False)
        buffer = bytearray(12)
        generator.next_bytes(buffer)
        self.assertEqual(len(buffer), 12)
        self.assertNotEqual(bytes(buffer), bytes(12))


class TestReseedAndSeeding(unittest.TestCase):
    def test_reseed_appends_random_source_bytes(self):
        random_source = MockRandomSource(seed_byte=0x00)
        drbg = CountingDRBG(entropy_source())
        generator = SP800SecureRandom(random_source, entropy_source(), drbg, False)
        generator.reseed(b"caller")
        self.assertEqual(drbg.reseed_inputs, [b"caller" + bytes(range(16))])

    def test_reseed_leaves_caller_buffer_untouched(self):
        drbg = CountingDRBG(entropy_source())
        generator = SP800SecureRandom(MockRandomSource(seed_byte=0x00), entropy_source(), drbg, False)
        caller = bytearray(b"caller")
        generator.reseed(caller)
        self.assertEqual(caller, bytearray(b"caller"))
        self.assertEqual(drbg.reseed_inputs, [b"caller" + bytes(range(16))])

    def test_reseed_without_random_source(self):
        drbg = CountingDRBG(entropy_source())
        generator = SP800SecureRandom(None, entropy_source(), drbg, False)
        generator.reseed()
        self.assertEqual(drbg.reseed_inputs, [b""])

    def test_generate_seed_and_properties(self):
        generator = SP800SecureRandom(None, entropy_source(MockRandomSource(seed_byte=0x00)),
                                      CountingDRBG(entropy_source()), True, algorithm="COUNTING")
        self.assertEqual(generator.generate_seed(20), bytes(range(20)))
        self.assertEqual(generator.algorithm, "COUNTING")
        self.assertTrue(generator.prediction_resistant)


if __name__ == '__main__':
    unittest.main()
