import numpy as np
from acceleration import AccelerationPair


def test_new_pair_is_zero():
    acc = AccelerationPair()
    assert np.allclose(acc.newest, 0.0)
    assert np.allclose(acc.previous, 0.0)

def test_rotate_moves_newest_to_previous():
    acc = AccelerationPair()
    acc.newest = (1.0, 2.0)
    acc.rotate()
    acc.newest = (3.0, 4.0)
    assert np.allclose(acc.previous, [1.0, 2.0])
    assert np.allclose(acc.newest, [3.0, 4.0])

def test_rotate_overwrites_oldest_slot():
    acc = AccelerationPair()
    acc.newest = (1.0, 1.0)
    acc.rotate()
    acc.newest = (2.0, 2.0)
    acc.rotate()
    acc.newest = (3.0, 3.0)
    assert np.allclose(acc.previous, [2.0, 2.0])
    assert np.allclose(acc.newest, [3.0, 3.0])

def test_mean_is_average_of_both_samples():
    acc = AccelerationPair()
    acc.newest = (1.0, -1.0)
    acc.rotate()
    acc.newest = (3.0, -5.0)
    assert np.allclose(acc.mean(), [2.0, -3.0])

def test_copy_is_independent():
    acc = AccelerationPair()
    acc.newest = (1.0, 2.0)
    other = acc.copy()
    acc.rotate()
    acc.newest = (5.0, 6.0)
    assert np.allclose(other.newest, [1.0, 2.0])
    assert np.allclose(other.previous, [0.0, 0.0])
