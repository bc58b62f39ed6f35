import math
from collections import namedtuple

import numpy as np

# Width of the run of beams summed into one candidate POI
WINDOW_WIDTH = 4

# Summed intensity a window must exceed to count as a POI rather than background
INTENSITY_THRESHOLD = 90.0

PoiWindow = namedtuple('PoiWindow', ['index', 'score'])


class InvalidFrame(ValueError):
    """Raised when a scan's geometry does not describe its own data."""


def beam_count(scan):
    """
    Number of beams described by the scan's angle bounds.

    Parameters:
        scan (LaserScan): Any object carrying angle_min, angle_max and angle_increment.
    Returns:
        int: floor((angle_max - angle_min) / angle_increment), never below zero.
    """
    increment = float(scan.angle_increment)
    if not math.isfinite(increment) or increment <= 0.0:
        raise InvalidFrame(f"angle_increment must be positive, got {scan.angle_increment}")

    span = float(scan.angle_max) - float(scan.angle_min)
    if not math.isfinite(span):
        raise InvalidFrame(
            f"angle bounds must be finite, got {scan.angle_min} to {scan.angle_max}"
        )
    beams = span / increment
    if not math.isfinite(beams):
        raise InvalidFrame(
            f"angle_increment {scan.angle_increment} is too small for a span of {span} rad"
        )
    return max(int(math.floor(beams)), 0)


def validate_frame(scan):
    """
    Check the ranges and intensities cover every beam the angles promise.

    Returns:
        int: The beam count N.
    """
    n = beam_count(scan)
    if len(scan.ranges) < n:
        raise InvalidFrame(f"scan has {len(scan.ranges)} ranges but its angles describe {n} beams")
    if len(scan.intensities) < n:
        raise InvalidFrame(
            f"scan has {len(scan.intensities)} intensities but its angles describe {n} beams"
        )
    return n


def valid_window_mask(ranges, range_min, range_max, window_width=WINDOW_WIDTH):
    """
    Flags the windows whose beams all lie within the sensor's reported min and max distances.

    Parameters:
        ranges (np.array): Range values, one per beam.
        range_min (float): Smallest range the sensor reports as trustworthy.
        range_max (float): Largest range the sensor reports as trustworthy.
        window_width (int): Number of consecutive beams in a window.
    Returns:
        np.array: Boolean array with one entry per window start index.
    """
    ranges = np.asarray(ranges, dtype=float)
    if len(ranges) < window_width:
        return np.zeros(0, dtype=bool)

    # NaN fails both comparisons, so it counts as out of range
    in_range = (ranges >= range_min) & (ranges <= range_max)

    # A window is valid when it contains no out of range beam
    bad_counts = np.convolve((~in_range).astype(int), np.ones(window_width, dtype=int), mode='valid')
    return bad_counts == 0


def window_scores(intensities, window_width=WINDOW_WIDTH):
    """
    Sum of the intensities of each run of window_width consecutive beams.

    Returns:
        np.array: scores[i] = intensities[i] + ... + intensities[i + window_width - 1]
    """
    intensities = np.asarray(intensities, dtype=float)
    if len(intensities) < window_width:
        return np.zeros(0)
    return np.convolve(intensities, np.ones(window_width), mode='valid')


def check_settings(window_width, threshold):
    """Reject a window width or threshold the scanner cannot search with."""
    if window_width < 1:
        raise ValueError(f"window_width must be at least 1, got {window_width}")
    # NaN fails this comparison too
    if not threshold >= 0:
        raise ValueError(f"threshold must be a non-negative number, got {threshold}")


def find_best_window(scan, window_width=WINDOW_WIDTH, threshold=INTENSITY_THRESHOLD):
    """
    Searches a scan for the run of beams with the max sum of their intensities, to find the POI.

    Only windows whose beams are all within the sensor's min and max range are considered,
    and the best one is only reported if its score is above the threshold. Equal scores
    resolve to the window with the lowest index.

    Parameters:
        scan (LaserScan): The frame to search.
        window_width (int): Number of consecutive beams summed per window.
        threshold (float): Score a window must exceed to be reported.
    Returns:
        PoiWindow or None: Start index and score of the best window, or None if none qualifies.
    """
    check_settings(window_width, threshold)

    n = validate_frame(scan)
    if n < window_width:
        return None

    ranges = np.asarray(scan.ranges[:n], dtype=float)
    intensities = np.asarray(scan.intensities[:n], dtype=float)

    valid = valid_window_mask(ranges, scan.range_min, scan.range_max, window_width)
    scores = window_scores(intensities, window_width)

    # Invalid windows and NaN sums can never win
    candidates = np.where(valid & ~np.isnan(scores), scores, -np.inf)

    # argmax returns the first of equal maxima
    best = int(np.argmax(candidates))
    if not candidates[best] > threshold:
        return None
    return PoiWindow(best, float(candidates[best]))


def highlight_window(ranges, result, window_width=WINDOW_WIDTH):
    """
    Zero every range outside the detected window, for visualization.

    Parameters:
        ranges (np.array): Range values of the frame.
        result (PoiWindow or None): Output of find_best_window.
    Returns:
        np.array: Copy of ranges where only the window's beams keep their value.
    """
    ranges = np.asarray(ranges, dtype=float)
    highlighted = np.zeros_like(ranges)
    if result is not None:
        window = slice(result.index, result.index + window_width)
        highlighted[window] = ranges[window]
    return highlighted


def format_detection(result):
    return f"intensity[{result.index}]: {result.score:g}"


def scan_table(scan, window_width=WINDOW_WIDTH):
    """
    Per-beam table of a scan and of the window that starts at each beam.

    Returns:
        np.array: Columns index, angle, range, intensity, window_valid, window_score.
        Beams where no full window starts get 0 in the window columns.
    """
    n = validate_frame(scan)
    ranges = np.asarray(scan.ranges[:n], dtype=float)
    intensities = np.asarray(scan.intensities[:n], dtype=float)
    angles = scan.angle_min + np.arange(n) * scan.angle_increment

    valid = np.zeros(n)
    scores = np.zeros(n)
    window_valid = valid_window_mask(ranges, scan.range_min, scan.range_max, window_width)
    valid[:len(window_valid)] = window_valid
    scores[:len(window_valid)] = window_scores(intensities, window_width)

    return np.column_stack((np.arange(n), angles, ranges, intensities, valid, scores))
