"""
Encrypted Metadata - Cost Measurements
Measures computation time and blob size of encrypt/decrypt per message length
"""

import time
import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from encrypted_metadata.schemes.metadata_cipher import MetadataCipher, parse_blob
from charm.toolbox.eccurve import secp256k1

MESSAGE_LENGTHS = [0, 5, 30, 31, 100, 500, 2000]


class MetadataCost:
    def __init__(self):
        self.cipher = MetadataCipher(curve=secp256k1)
        # Pre-generate recipient keys for consistent measurements
        self.public_key, self.private_key = self.cipher.keygen()

    def measure_encrypt(self, message, iterations=100):
        """Measure sender side: encode + ECDH + masking"""
        total_time = 0
        blob = None

        for _ in range(iterations):
            start_time = time.time()
            blob = self.cipher.encrypt(self.public_key, message)
            total_time += time.time() - start_time

        avg_time = total_time / iterations
        return avg_time * 1000, blob  # Convert to ms

    def measure_decrypt(self, blob, iterations=100):
        """Measure recipient side: ECDH + auth check + unmasking + decode"""
        total_time = 0

        for _ in range(iterations):
            start_time = time.time()
            self.cipher.decrypt(self.private_key, blob)
            total_time += time.time() - start_time

        avg_time = total_time / iterations
        return avg_time * 1000  # Convert to ms

    def run_measurements(self, iterations=100):
        """Run all measurements and display results"""
        print("=" * 60)
        print("ENCRYPTED METADATA - COST MEASUREMENTS")
        print("=" * 60)
        print(f"Running {iterations} iterations for each message length...\n")

        results = {}
        for length in MESSAGE_LENGTHS:
            message = "a" * length
            enc_time, blob = self.measure_encrypt(message, iterations)
            dec_time = self.measure_decrypt(blob, iterations)
            results[length] = {
                'chunks': parse_blob(blob).length,
                'encrypt': enc_time,
                'decrypt': dec_time,
                'storage': (len(blob) - 2) // 2,
            }

        print(f"{'Chars':<8} {'Chunks':<8} {'Encrypt (ms)':<15} {'Decrypt (ms)':<15} {'Blob (bytes)':<15}")
        print("-" * 61)
        for length, r in results.items():
            print(f"{length:<8} {r['chunks']:<8} {r['encrypt']:<15.3f} {r['decrypt']:<15.3f} {r['storage']:<15}")
        print("=" * 60)

        return results


if __name__ == "__main__":
    cost = MetadataCost()
    results = cost.run_measurements()

    # Additional formatted output for LaTeX tables
    print("\n\n" + "=" * 60)
    print("FORMATTED OUTPUT FOR LATEX TABLE")
    print("=" * 60)
    for length, r in results.items():
        print(f"{length} & {r['chunks']} & {r['encrypt']:.3f} & {r['decrypt']:.3f} & {r['storage']}")
    print("\n" + "=" * 60)
