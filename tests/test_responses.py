from zipserve.api_server.responses import (build_listing_page, content_disposition,
                                           error_response)
from zipserve.core.exceptions import NotFoundError


def test_listing_page_has_one_link_per_name():
    page = build_listing_page(["a.txt", "sub"])
    assert page.count("<li>") == 2
    assert '<a href="./zip/a.txt">a.txt</a>' in page
    assert '<a href="./zip/sub">sub</a>' in page


def test_listing_page_keeps_given_order():
    page = build_listing_page(["b", "a"])
    assert page.index("./zip/b") < page.index("./zip/a")


def test_content_disposition_plain_and_encoded():
    assert content_disposition("a.txt") == "attachment; filename=a.txt.zip"
    assert content_disposition("日本") == "attachment; filename*=UTF-8''%E6%97%A5%E6%9C%AC.zip"
    assert content_disposition("line\nbreak").startswith("attachment; filename*=UTF-8''")


def test_error_response_body():
    response = error_response(NotFoundError("The asked file does not exist"))
    assert response.status_code == 500
    assert response.body == b"Request failed: The asked file does not exist.\n"
