import pytest

from ytgify_share.server.services.pagination import PageParams


@pytest.mark.parametrize(
    "page,per_page,expected",
    [
        (None, None, (1, 20)),
        (3, 10, (3, 10)),
        (0, 0, (1, 1)),
        (-5, 500, (1, 100)),
    ],
)
def test_build_clamps_values(page, per_page, expected):
    params = PageParams.build(page, per_page)
    assert (params.page, params.per_page) == expected


def test_offset_and_meta():
    params = PageParams.build(3, 25)
    assert params.offset == 50
    meta = params.meta(61)
    assert meta.model_dump() == {"page": 3, "per_page": 25, "total": 61}
