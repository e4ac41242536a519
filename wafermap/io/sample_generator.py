import numpy as np
from typing import List

from wafermap.core.config import PRR_FIELD_ORDER, RECORD_PREFIX, FIELD_DELIMITER, PASS_BIN

# Fail bins drawn for non-passing dies.
SAMPLE_FAIL_BINS = [2, 3, 4, 7]

def generate_sample_lines(radius: int = 6, pass_rate: float = 0.85, seed: int = 55) -> List[str]:
    """
    Generates synthetic PRR record lines for a round wafer centered on the origin.

    Args:
        radius: Wafer radius in die pitches; dies whose center lies inside the circle are tested.
        pass_rate: Probability that a die gets bin 1.
        seed: Random seed so the demo map is stable between reruns.
    """
    rng = np.random.default_rng(seed)
    lines = ["FAR|1|4", "MIR|sample_lot|sample_wafer"]

    part_id = 0
    for y in range(radius, -radius - 1, -1):
        for x in range(-radius, radius + 1):
            if x * x + y * y > radius * radius:
                continue
            part_id += 1
            passed = rng.random() < pass_rate
            hard_bin = PASS_BIN if passed else int(rng.choice(SAMPLE_FAIL_BINS))
            fields = {
                'HEAD_NUM': "1",
                'SITE_NUM': str(part_id % 4),
                'PART_FLG': "0" if passed else "8",
                'NUM_TEST': str(int(rng.integers(100, 120))),
                'HARD_BIN': str(hard_bin),
                'SOFT_BIN': str(hard_bin),
                'X_COORD': str(x),
                'Y_COORD': str(y),
                'TEST_T': str(int(rng.integers(800, 1200))),
                'PART_ID': str(part_id),
                'PART_TXT': f"{float(hard_bin):.1f}",
                'PART_FIX': "",
            }
            lines.append(RECORD_PREFIX + FIELD_DELIMITER.join(fields[name] for name in PRR_FIELD_ORDER))

    return lines
