"""
Tests for Proctoring Detectors

Covers skin classification, region growing, frame scanning and
region clustering.
"""

import pytest
import numpy as np


class TestSkinClassifier:
    """Tests for is_skin_like / skin_mask"""

    def test_typical_skin_tone(self, skin_color):
        """Test a warm skin tone passes"""
        from examguard.proctor.detectors import is_skin_like

        assert is_skin_like(*skin_color) is True

    @pytest.mark.parametrize("rgb", [
        (0, 0, 0),
        (255, 255, 255),
        (0, 0, 255),
        (0, 255, 0),
        (128, 128, 128),
    ])
    def test_non_skin_colors(self, rgb):
        """Test black, white, saturated primaries and grey are rejected"""
        from examguard.proctor.detectors import is_skin_like

        assert is_skin_like(*rgb) is False

    def test_rgb_rule_requires_red_dominance(self):
        """Test green-dominant color fails even with skin-like magnitudes"""
        from examguard.proctor.detectors.skin_classifier import _rgb_rule

        assert _rgb_rule(200, 140, 110) is True
        assert _rgb_rule(140, 200, 110) is False
        # |r - g| must exceed 15
        assert _rgb_rule(150, 140, 60) is False

    def test_ycbcr_rule_window(self):
        """Test YCbCr fires inside the chroma window only"""
        from examguard.proctor.detectors.skin_classifier import _ycbcr_rule

        # Cb ~ 102.9, Cr ~ 160.4
        assert _ycbcr_rule(180, 120, 90) is True
        # Neutral grey sits at Cb = Cr = 128
        assert _ycbcr_rule(128, 128, 128) is False

    def test_hsv_rule_bounds(self):
        """Test HSV saturation and value bounds"""
        from examguard.proctor.detectors.skin_classifier import _hsv_rule

        # h ~ 26.7, s = 0.45, v ~ 0.78
        assert _hsv_rule(200, 150, 110) is True
        # Too dark: v < 0.35
        assert _hsv_rule(60, 45, 33) is False
        # Undefined hue (grey) has zero saturation
        assert _hsv_rule(200, 200, 200) is False

    def test_deterministic(self):
        """Test repeated calls give identical answers"""
        from examguard.proctor.detectors import is_skin_like

        rng = np.random.default_rng(7)
        for r, g, b in rng.integers(0, 256, size=(200, 3)):
            first = is_skin_like(r, g, b)
            assert all(is_skin_like(r, g, b) == first for _ in range(3))

    def test_mask_matches_scalar(self):
        """Test vectorized mask agrees with the scalar rule on every pixel"""
        from examguard.proctor.detectors import is_skin_like, skin_mask

        rng = np.random.default_rng(42)
        frame = rng.integers(0, 256, size=(40, 50, 3), dtype=np.uint8)
        # Bias half the frame toward skin tones so both answers occur
        frame[:20, :, 0] = rng.integers(120, 256, size=(20, 50))

        mask = skin_mask(frame)

        assert mask.shape == (40, 50)
        for y in range(40):
            for x in range(50):
                assert bool(mask[y, x]) == is_skin_like(*frame[y, x]), (x, y, frame[y, x])
        assert mask.any()
        assert not mask.all()

    def test_mask_ignores_alpha(self, skin_color):
        """Test RGBA frames are classified on RGB only"""
        from examguard.proctor.detectors import skin_mask

        frame = np.zeros((4, 4, 4), dtype=np.uint8)
        frame[1, 1, :3] = skin_color
        frame[..., 3] = 255

        mask = skin_mask(frame)
        assert mask[1, 1]
        assert mask.sum() == 1


class TestRegionGrower:
    """Tests for RegionGrower"""

    def _frame(self, skin_color, x0, y0, w, h, size=64):
        frame = np.zeros((size, size, 3), dtype=np.uint8)
        frame[y0:y0 + h, x0:x0 + w] = skin_color
        return frame

    def test_small_region_exact_size(self, skin_color):
        """Test a region below the cap is measured exactly"""
        from examguard.proctor.detectors import grow_region

        frame = self._frame(skin_color, 10, 10, 10, 10)
        assert grow_region(frame, 15, 15) == 100

    def test_large_region_capped(self, skin_color):
        """Test growth stops at the 200 pixel cap"""
        from examguard.proctor.detectors import grow_region

        frame = self._frame(skin_color, 0, 0, 40, 40)
        assert grow_region(frame, 20, 20) == 200

    def test_full_frame_capped(self, skin_color):
        """Test a fully skin-colored frame never exceeds the cap"""
        from examguard.proctor.detectors import grow_region

        frame = np.full((120, 160, 3), skin_color, dtype=np.uint8)
        assert grow_region(frame, 0, 0) == 200

    @pytest.mark.parametrize("seed", [(-1, 5), (5, -1), (64, 5), (5, 64), (100, 100)])
    def test_out_of_bounds_seed(self, skin_color, seed):
        """Test seeds outside the frame return 0"""
        from examguard.proctor.detectors import grow_region

        frame = self._frame(skin_color, 0, 0, 64, 64)
        assert grow_region(frame, *seed) == 0

    def test_non_skin_seed(self, skin_color):
        """Test a non-skin seed returns 0"""
        from examguard.proctor.detectors import grow_region

        frame = self._frame(skin_color, 10, 10, 10, 10)
        assert grow_region(frame, 40, 40) == 0

    def test_four_connectivity(self, skin_color):
        """Test diagonal neighbours are not joined"""
        from examguard.proctor.detectors import grow_region

        frame = np.zeros((10, 10, 3), dtype=np.uint8)
        frame[2, 2] = skin_color
        frame[3, 3] = skin_color

        assert grow_region(frame, 2, 2) == 1

    def test_visits_each_pixel_once(self, skin_color):
        """Test visited coordinates are unique and skin visits equal the size"""
        from examguard.proctor.detectors import RegionGrower

        frame = self._frame(skin_color, 5, 5, 12, 9)
        grower = RegionGrower(frame)

        size = grower.grow(8, 8)
        visited = grower.last_visited

        assert size == 108
        assert len(visited) == len(set(visited))
        assert sum(1 for x, y in visited if grower.mask[y, x]) == size

    def test_memoized_result_matches_fresh_growth(self, skin_color):
        """Test reused grower reports the same size as a fresh fill"""
        from examguard.proctor.detectors import RegionGrower, grow_region

        frame = self._frame(skin_color, 0, 0, 30, 30)
        frame[40:45, 40:45] = skin_color
        grower = RegionGrower(frame)

        for seed in [(0, 0), (4, 4), (29, 29), (42, 42), (44, 40)]:
            assert grower.grow(*seed) == grow_region(frame, *seed)

    def test_requires_frame_or_mask(self):
        """Test constructing without input fails loudly"""
        from examguard.proctor.detectors import RegionGrower

        with pytest.raises(ValueError):
            RegionGrower()


class TestFrameScanner:
    """Tests for FrameScanner"""

    def test_black_frame(self, black_frame):
        """Test no skin, no regions, no movement on a black frame"""
        from examguard.proctor.detectors import FrameScanner

        result = FrameScanner().scan(black_frame)

        assert result.skin_pixels == 0
        assert result.candidate_regions == []
        assert result.movement_detected is False

    def test_single_blob_regions(self, single_person_frame):
        """Test every grid seed inside the blob becomes a region"""
        from examguard.proctor.detectors import FrameScanner

        result = FrameScanner().scan(single_person_frame)

        # 6x6 grid seeds in the blob + 1500 speckle samples
        assert result.skin_pixels == 1536
        assert len(result.candidate_regions) == 36
        assert all(r.size == 200 for r in result.candidate_regions)
        assert (result.candidate_regions[0].x, result.candidate_regions[0].y) == (88, 88)

    def test_regions_in_row_major_order(self, two_person_frame):
        """Test regions are collected row by row"""
        from examguard.proctor.detectors import FrameScanner

        regions = FrameScanner().scan(two_person_frame).candidate_regions
        coords = [(r.y, r.x) for r in regions]

        assert coords == sorted(coords)

    def test_small_regions_not_recorded(self, make_frame):
        """Test speckle counts as skin but never forms a region"""
        from examguard.proctor.detectors import FrameScanner

        result = FrameScanner().scan(make_frame(blobs=[]))

        assert result.skin_pixels == 1500
        assert result.candidate_regions == []

    def test_movement_detected(self, make_frame):
        """Test a shifted blob registers as movement"""
        from examguard.proctor.detectors import FrameScanner

        before = make_frame(blobs=[(88, 88)], speckle=False)
        after = make_frame(blobs=[(100, 88)], speckle=False)

        assert FrameScanner().scan(after, before).movement_detected is True

    def test_no_movement_on_identical_frames(self, single_person_frame):
        """Test identical frames show no movement"""
        from examguard.proctor.detectors import FrameScanner

        previous = single_person_frame.copy()
        assert FrameScanner().scan(single_person_frame, previous).movement_detected is False

    def test_small_change_below_threshold(self, black_frame, skin_color):
        """Test a handful of changed pixels does not count as movement"""
        from examguard.proctor.detectors import FrameScanner

        changed = black_frame.copy()
        # 40 sampled pixels changed; threshold is > 40000 / 1000
        changed[0, 0:160:4] = skin_color

        assert FrameScanner().detect_movement(changed, black_frame) is False

        changed[1, 0:4:4] = skin_color
        assert FrameScanner().detect_movement(changed, black_frame) is True

    def test_mismatched_previous_frame(self, single_person_frame):
        """Test a previous frame of different size means no motion data"""
        from examguard.proctor.detectors import FrameScanner

        previous = np.full((120, 160, 3), 255, dtype=np.uint8)
        result = FrameScanner().scan(single_person_frame, previous)

        assert result.movement_detected is False


class TestRegionClusterer:
    """Tests for cluster_regions"""

    def test_empty(self):
        """Test no regions gives no clusters"""
        from examguard.proctor.detectors import cluster_regions

        assert cluster_regions([], 200, 200) == []

    def test_merges_nearby_regions(self):
        """Test regions within the merge radius collapse into one cluster"""
        from examguard.proctor.detectors import cluster_regions
        from examguard.proctor.types import SkinRegion

        regions = [SkinRegion(10, 10, 60), SkinRegion(20, 20, 60), SkinRegion(150, 150, 100)]
        clusters = cluster_regions(regions, 200, 200)

        assert len(clusters) == 2
        assert (clusters[0].x, clusters[0].y, clusters[0].size) == (10, 10, 120)
        assert (clusters[1].x, clusters[1].y, clusters[1].size) == (150, 150, 100)

    def test_anchor_does_not_move(self):
        """Test distance is always measured from the opening region"""
        from examguard.proctor.detectors import cluster_regions
        from examguard.proctor.types import SkinRegion

        # Radius = 30: B is 25 from A, C is 25 from B but 50 from A
        regions = [SkinRegion(0, 0, 100), SkinRegion(25, 0, 100), SkinRegion(50, 0, 100)]
        clusters = cluster_regions(regions, 200, 200)

        assert [(c.x, c.size) for c in clusters] == [(0, 200), (50, 100)]

    def test_distance_is_strict(self):
        """Test a region exactly at the radius is not merged"""
        from examguard.proctor.detectors import cluster_regions
        from examguard.proctor.types import SkinRegion

        regions = [SkinRegion(0, 0, 100), SkinRegion(30, 0, 100)]
        assert len(cluster_regions(regions, 200, 200)) == 2

    def test_small_clusters_dropped(self):
        """Test clusters of total size <= 80 are discarded"""
        from examguard.proctor.detectors import cluster_regions
        from examguard.proctor.types import SkinRegion

        regions = [SkinRegion(0, 0, 80), SkinRegion(100, 100, 81), SkinRegion(180, 180, 51)]
        clusters = cluster_regions(regions, 200, 200)

        assert [(c.x, c.size) for c in clusters] == [(100, 81)]

    def test_radius_uses_smaller_dimension(self):
        """Test the merge radius follows min(width, height)"""
        from examguard.proctor.detectors import cluster_regions
        from examguard.proctor.types import SkinRegion

        regions = [SkinRegion(0, 0, 100), SkinRegion(40, 0, 100)]

        # min = 300 -> radius 45
        assert len(cluster_regions(regions, 400, 300)) == 1
        # min = 200 -> radius 30
        assert len(cluster_regions(regions, 400, 200)) == 2

    def test_bounds_on_random_input(self):
        """Test cluster count never exceeds region count and sizes exceed 80"""
        from examguard.proctor.detectors import cluster_regions
        from examguard.proctor.types import SkinRegion

        rng = np.random.default_rng(3)
        for _ in range(50):
            n = int(rng.integers(0, 30))
            regions = [
                SkinRegion(int(x), int(y), int(s))
                for x, y, s in zip(
                    rng.integers(0, 320, n), rng.integers(0, 240, n), rng.integers(51, 201, n)
                )
            ]
            clusters = cluster_regions(regions, 320, 240)

            assert len(clusters) <= len(regions)
            assert all(c.size > 80 for c in clusters)

    def test_single_blob_forms_one_cluster(self, single_person_frame):
        """Test the compact blob's overlapping regions become one cluster"""
        from examguard.proctor.detectors import FrameScanner, cluster_regions

        scan = FrameScanner().scan(single_person_frame)
        clusters = cluster_regions(scan.candidate_regions, 200, 200)

        assert len(clusters) == 1
        assert clusters[0].size == 36 * 200
