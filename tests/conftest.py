"""
共享测试夹具
"""
import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from game.config import BowConfig, LANDMARK_COUNT, POINTER_LANDMARK, REFERENCE_LANDMARK


def make_landmarks(pointer, reference, count=LANDMARK_COUNT):
    """生成一组关键点，只有食指和拇指指尖有意义"""
    points = np.full((count, 3), 0.5)
    points[POINTER_LANDMARK, :2] = pointer
    points[REFERENCE_LANDMARK, :2] = reference
    return points


class RecordingRenderer:
    """记录每次 render 调用的假渲染器"""

    def __init__(self):
        self.frames = []

    def render(self, bow, nocked, projectiles, power):
        self.frames.append({
            'bow': bow,
            'nocked': nocked,
            'projectiles': projectiles,
            'power': power,
        })


@pytest.fixture
def bow_config():
    return BowConfig()


@pytest.fixture
def landmarks():
    return make_landmarks


@pytest.fixture
def renderer():
    return RecordingRenderer()
