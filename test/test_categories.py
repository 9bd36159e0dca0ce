import asyncio

import pytest

from blog_admin_console.categories import CategoryAdminView, CategoryDirectory
from blog_admin_console.errors import AuthRequired, FetchError, RequestFailed


@pytest.mark.asyncio
async def test_directory_fetches_every_category(api):
    categories = await CategoryDirectory(api).fetch_all()
    assert [(c.id, c.name) for c in categories] == [
        ("a", "Python"),
        ("b", "Rust"),
        ("c", "Go"),
    ]


@pytest.mark.asyncio
async def test_directory_failure_carries_status(api, backend):
    backend.failures["GET"] = 500
    with pytest.raises(FetchError) as excinfo:
        await CategoryDirectory(api).fetch_all()
    assert excinfo.value.status == 500
    assert str(excinfo.value) == "500: Internal Server Error"


@pytest.mark.asyncio
async def test_declined_confirmation_sends_nothing(api, backend, token):
    view = CategoryAdminView(api)
    await view.load()
    backend.requests.clear()

    deleted = await view.delete(view.categories[0], token, confirm=lambda msg: False)

    assert deleted is False
    assert backend.requests == []


@pytest.mark.asyncio
async def test_delete_refetches_list(api, backend, token):
    view = CategoryAdminView(api)
    await view.load()
    prompts = []

    def confirm(message):
        prompts.append(message)
        return True

    assert await view.delete(view.categories[1], token, confirm=confirm)

    assert "Rust" in prompts[0]
    assert [c.id for c in view.categories] == ["a", "c"]
    assert not view.is_submitting


@pytest.mark.asyncio
async def test_delete_accepts_async_confirm(api, token):
    view = CategoryAdminView(api)
    await view.load()

    async def confirm(message):
        return True

    assert await view.delete(view.categories[0], token, confirm=confirm)
    assert [c.id for c in view.categories] == ["b", "c"]


@pytest.mark.asyncio
async def test_delete_failure_unlocks_and_notifies(api, backend, notify, token):
    view = CategoryAdminView(api, notify=notify)
    await view.load()
    backend.failures["DELETE"] = 500

    with pytest.raises(RequestFailed):
        await view.delete(view.categories[0], token)

    assert not view.is_submitting
    assert len(notify.calls) == 1
    assert len(view.categories) == 3


@pytest.mark.asyncio
async def test_delete_without_token(api, backend, notify):
    view = CategoryAdminView(api, notify=notify)
    await view.load()

    with pytest.raises(AuthRequired):
        await view.delete(view.categories[0], None)
    assert backend.count("DELETE") == 0


@pytest.mark.asyncio
async def test_failed_load_is_terminal(api, backend):
    backend.failures["GET"] = 503
    view = CategoryAdminView(api)
    await view.load()

    assert view.categories is None
    assert view.error.status == 503
    assert not view.is_loading


@pytest.mark.asyncio
async def test_overlapping_deletes_send_one_request(api, backend, token):
    view = CategoryAdminView(api)
    await view.load()
    first, second = view.categories[0], view.categories[1]

    async def confirm(message):
        await asyncio.sleep(0)
        return True

    results = await asyncio.gather(
        view.delete(first, token, confirm=confirm),
        view.delete(second, token, confirm=confirm),
    )

    assert results == [True, False]
    assert backend.count("DELETE") == 1
    assert [c.id for c in view.categories] == ["b", "c"]
    assert not view.is_submitting


@pytest.mark.asyncio
async def test_declined_or_unauthenticated_delete_unlocks(api, token):
    view = CategoryAdminView(api)
    await view.load()

    declined = await view.delete(view.categories[0], token, confirm=lambda m: False)
    assert declined is False
    assert not view.is_submitting

    with pytest.raises(AuthRequired):
        await view.delete(view.categories[0], None)
    assert not view.is_submitting
