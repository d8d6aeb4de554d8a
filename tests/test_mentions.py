from social_client.services import extract_mentions, mentions_user, render_mentions


def test_extract_mentions_is_ordered_and_unique():
    text = "thanks @bob and @alice_1, cc @bob"
    assert extract_mentions(text) == ["bob", "alice_1"]


def test_extract_mentions_handles_empty():
    assert extract_mentions(None) == []
    assert extract_mentions("no one here @ all") == []


def test_mentions_user_is_case_insensitive():
    assert mentions_user("hey @Alice!", "alice")
    assert not mentions_user("hey @alicia", "alice")


def test_render_mentions_escapes_and_links():
    html = render_mentions("<b>hi</b> @bob & @carol")
    assert str(html) == (
        '&lt;b&gt;hi&lt;/b&gt; <a href="/user/bob" class="mention">@bob</a> '
        '&amp; <a href="/user/carol" class="mention">@carol</a>'
    )


def test_render_mentions_custom_href():
    html = render_mentions("@dave", href="/profiles/{username}")
    assert 'href="/profiles/dave"' in str(html)
