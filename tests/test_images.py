from newsthumb.images import evaluate, first_url_token, is_valid_candidate
from newsthumb.models import PageSnapshot


def test_first_url_token_drops_descriptors():
    assert first_url_token("https://x.example/a.jpg 480w, https://x.example/b.jpg 960w") == (
        "https://x.example/a.jpg"
    )
    assert first_url_token("  https://x.example/a.jpg 2x") == "https://x.example/a.jpg"
    assert first_url_token("") is None
    assert first_url_token(None) is None


def test_valid_candidate_extensions_case_insensitive():
    assert is_valid_candidate("https://a.example/pic.JPG?w=300")
    assert is_valid_candidate("https://a.example/pic.jpeg")
    assert is_valid_candidate("https://a.example/pic.png#frag")
    assert is_valid_candidate("https://a.example/pic.WebP")


def test_invalid_candidates_rejected():
    assert not is_valid_candidate(None)
    assert not is_valid_candidate("")
    assert not is_valid_candidate("https://a.example/pic.gif")
    assert not is_valid_candidate("https://a.example/pic")
    assert not is_valid_candidate("https://a.example/image?format=.jpg")
    assert not is_valid_candidate("https://cdn.example/photo.jpg/w=300")
    assert not is_valid_candidate("https://a.example/site-LOGO.png")
    for marker in ("spacer", "1x1", "icon", "hamburger", "menu", "header"):
        assert not is_valid_candidate(f"https://a.example/{marker}/pic.jpg")


def test_og_image_beats_generic_img():
    snapshot = PageSnapshot(
        og_image="https://a.example/og.jpg",
        page_images=("https://a.example/body.jpg",),
    )
    assert evaluate(snapshot) == "https://a.example/og.jpg"


def test_priority_order_across_tiers():
    snapshot = PageSnapshot(
        og_image="https://a.example/logo.png",
        twitter_image=None,
        picture_sources=("https://a.example/pic-small.webp 480w, https://a.example/pic-big.webp 960w",),
        container_images=("https://a.example/container.jpg",),
        page_images=("https://a.example/body.jpg",),
    )
    assert evaluate(snapshot) == "https://a.example/pic-small.webp"


def test_twitter_image_used_when_og_missing():
    snapshot = PageSnapshot(
        twitter_image="https://a.example/tw.png",
        article_images=("https://a.example/article.jpg",),
    )
    assert evaluate(snapshot) == "https://a.example/tw.png"


def test_only_invalid_candidates_yield_none():
    snapshot = PageSnapshot(
        og_image="https://a.example/brand-logo.jpg",
        page_images=("https://a.example/animation.gif",),
    )
    assert evaluate(snapshot) is None


def test_empty_snapshot_yields_none():
    assert evaluate(PageSnapshot()) is None


def test_query_string_is_kept_in_result():
    snapshot = PageSnapshot(og_image="https://a.example/pic.JPG?w=300")
    assert evaluate(snapshot) == "https://a.example/pic.JPG?w=300"
