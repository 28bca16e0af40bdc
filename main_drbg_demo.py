# main_drbg_demo.py
"""
Main script to demonstrate building SP 800-90A DRBGs with the builder:
all four mechanisms, prediction resistance, and a shared entropy pool.
"""
import logging

from drbg_mechanisms.primitives import AES, SHA1, SHA256, HMac
from entropy_sources.entropy_pool import EntropyPool, PooledEntropySourceProvider
from entropy_sources.random_source import MockRandomSource, OsUrandomRandomSource
from sp800_random.builder import SP800SecureRandomBuilder
from sp800_random.errors import ConfigurationError


def run_full_demo():
    print("=" * 50)
    print(" SP 800-90A DRBG Builder Demo")
    print("=" * 50)

    # --- Setup ---
    random_source = OsUrandomRandomSource()
    builder = SP800SecureRandomBuilder(random_source, False) \
        .set_personalization_string(b"drbg-demo") \
        .set_security_strength(256) \
        .set_entropy_bits_required(256)
    print(f"\n[Setup] Builder config: {builder.config}")
    nonce = bytes.fromhex("00112233")

    # --- Scenario 1: one generator per mechanism ---
    print("\n--- Scenario 1: All four mechanisms ---")
    generators = [
        builder.build_hash(SHA256, nonce, False),
        builder.build_hmac(HMac(SHA256), nonce, False),
        builder.build(AES, 256, 384, nonce, False),
        builder.build_dual_ec(SHA256, nonce, False),
    ]
    for generator in generators:
        print(f"[Result] {generator.algorithm:<22} {generator.generate_bytes(32).hex()}")

    # --- Scenario 2: prediction resistance ---
    print("\n--- Scenario 2: Prediction resistant Hash DRBG ---")
    mock_source = MockRandomSource(seed_byte=0x10)
    pr_builder = SP800SecureRandomBuilder(mock_source, True)
    pr_generator = pr_builder.build_hash(SHA256, nonce, True)
    calls_before = mock_source.calls
    for _ in range(3):
        pr_generator.generate_bytes(16)
    print(f"[Result] 3 requests pulled entropy {mock_source.calls - calls_before} times (one reseed each).")

    # --- Scenario 3: configuration the primitive cannot honour ---
    print("\n--- Scenario 3: SHA-1 cannot reach 256-bit strength ---")
    try:
        builder.build_hash(SHA1, nonce, False)
        print("FAILURE (unexpected): SHA-1 accepted for 256-bit security strength.")
    except ConfigurationError as e:
        print(f"SUCCESS (expected): {e}")

    # --- Scenario 4: builders sharing an entropy pool ---
    print("\n--- Scenario 4: Shared entropy pool ---")
    with EntropyPool(random_source=random_source, max_size_bytes=256, refresh_interval_sec=1.0) as pool:
        pooled_builder = SP800SecureRandomBuilder(entropy_source_provider=PooledEntropySourceProvider(pool))
        pooled = pooled_builder.build_hmac(HMac(SHA256), nonce, True)
        print(f"[Result] {pooled.algorithm}: {pooled.generate_bytes(32).hex()} (pool now {pool.available()}B)")

    print("\nDRBG Demo finished.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run_full_demo()
