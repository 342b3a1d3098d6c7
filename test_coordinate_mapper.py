# =============================================================================
# test_coordinate_mapper.py — Detector space → pixel / display space
# Run: pytest test_coordinate_mapper.py
# =============================================================================

import numpy as np
import pytest

from face_engine.coordinate_mapper import (
    CoordinateMapper,
    denormalize, denormalize_to_viewport,
    map_point, map_point_to_viewport, map_region,
)
from face_engine.data_structures import FaceBox, PixelPoint, PixelRect, Viewport
from conftest import DEFAULT_BOX, FRAME_W, FRAME_H

FULL_FRAME = FaceBox(0.0, 0.0, 1.0, 1.0)


class TestDenormalize:
    def test_box_flips_to_top_left_origin(self):
        rect = denormalize(DEFAULT_BOX, FRAME_W, FRAME_H)
        assert rect == PixelRect(160.0, 120.0, 320.0, 240.0)
        assert rect.center_x == pytest.approx(320.0)
        assert rect.center_y == pytest.approx(240.0)

    def test_bottom_aligned_box_ends_at_frame_bottom(self):
        rect = denormalize(FaceBox(0.1, 0.0, 0.2, 0.25), FRAME_W, FRAME_H)
        assert rect.y + rect.height == pytest.approx(FRAME_H)

    def test_zero_size_box(self):
        rect = denormalize(FaceBox(0.4, 0.4, 0.0, 0.0), FRAME_W, FRAME_H)
        assert rect.width == 0.0
        assert rect.height == 0.0

    @pytest.mark.parametrize("w,h", [(0, 480), (640, 0), (0, 0), (-10, 480)])
    def test_zero_image_dimensions_give_zero_rect(self, w, h):
        assert denormalize(DEFAULT_BOX, w, h) == PixelRect()

    def test_partially_off_frame_box_is_not_clamped(self):
        rect = denormalize(FaceBox(-0.1, 0.8, 0.3, 0.4), FRAME_W, FRAME_H)
        assert rect.x < 0
        assert rect.y < 0


class TestMapPoint:
    def test_bottom_edge_maps_to_image_height(self):
        assert map_point((0.3, 0.0), FULL_FRAME, FRAME_W, FRAME_H).y == FRAME_H

    def test_top_edge_maps_to_zero(self):
        assert map_point((0.3, 1.0), FULL_FRAME, FRAME_W, FRAME_H).y == 0.0

    def test_local_point_projects_through_face_box(self):
        # Centre of the face box is the centre of the frame
        p = map_point((0.5, 0.5), DEFAULT_BOX, FRAME_W, FRAME_H)
        assert p == PixelPoint(320.0, 240.0)

    def test_local_origin_is_box_bottom_left(self):
        p = map_point((0.0, 0.0), DEFAULT_BOX, FRAME_W, FRAME_H)
        rect = denormalize(DEFAULT_BOX, FRAME_W, FRAME_H)
        assert p.x == pytest.approx(rect.x)
        assert p.y == pytest.approx(rect.y + rect.height)

    def test_zero_image_does_not_crash(self):
        assert map_point((0.5, 0.5), DEFAULT_BOX, 0, 0) == PixelPoint(0.0, 0.0)


class TestMapRegion:
    def test_order_is_preserved(self):
        region = [(0.0, 0.0), (0.5, 0.5), (1.0, 1.0)]
        points = map_region(region, DEFAULT_BOX, FRAME_W, FRAME_H)
        assert [p.x for p in points] == pytest.approx([160.0, 320.0, 480.0])
        assert [p.y for p in points] == pytest.approx([360.0, 240.0, 120.0])

    def test_numpy_region_matches_list_region(self):
        region = [(0.1, 0.2), (0.7, 0.9)]
        from_list = map_region(region, DEFAULT_BOX, FRAME_W, FRAME_H)
        from_array = map_region(np.array(region), DEFAULT_BOX, FRAME_W, FRAME_H)
        assert from_list == from_array

    def test_empty_region(self):
        assert map_region([], DEFAULT_BOX, FRAME_W, FRAME_H) == []


class TestViewport:
    def test_matching_viewport_equals_simple_mapping(self):
        vp = Viewport(FRAME_W, FRAME_H)
        assert denormalize_to_viewport(DEFAULT_BOX, FRAME_W, FRAME_H, vp) == \
            denormalize(DEFAULT_BOX, FRAME_W, FRAME_H)
        assert map_point_to_viewport((0.2, 0.8), DEFAULT_BOX, FRAME_W, FRAME_H, vp) == \
            map_point((0.2, 0.8), DEFAULT_BOX, FRAME_W, FRAME_H)

    def test_scale_and_horizontal_centering(self):
        # Height 480 → 240 gives scale 0.5; 320 px of content in 400 px → offset 40
        mapper = CoordinateMapper(FRAME_W, FRAME_H, Viewport(400, 240))
        assert mapper.scale == pytest.approx(0.5)
        assert mapper.offset_x == pytest.approx(40.0)
        rect = mapper.rect(DEFAULT_BOX)
        assert rect == PixelRect(120.0, 60.0, 160.0, 120.0)

    def test_portrait_viewport_crops_symmetrically(self):
        mapper = CoordinateMapper(FRAME_W, FRAME_H, Viewport(240, 480))
        assert mapper.scale == pytest.approx(1.0)
        assert mapper.offset_x == pytest.approx(-200.0)
        centre = mapper.point((0.5, 0.5), DEFAULT_BOX)
        assert centre.x == pytest.approx(120.0)

    def test_degenerate_viewport(self):
        assert denormalize_to_viewport(DEFAULT_BOX, FRAME_W, FRAME_H, Viewport(0, 0)) == PixelRect()
