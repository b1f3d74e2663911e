"""
Service tests for metered collections: links, pages, blocks, socials and the menu.
Run: pytest tests/unit/test_collections.py -v
"""
import pytest
from fastapi import HTTPException

from linkfolio.core.errors import PlanLimitExceeded
from linkfolio.repositories.link_repository import LinkRepository
from linkfolio.repositories.menu_repository import MenuRepository
from linkfolio.repositories.page_repository import BlockRepository, PageRepository
from linkfolio.schemas.link import LinkCreate, LinkUpdate
from linkfolio.schemas.menu import ProductCreate, SectionCreate
from linkfolio.schemas.page import BlockCreate, BlockUpdate, PageCreate
from linkfolio.schemas.social import SocialCreate
from linkfolio.services.link_service import LinkService
from linkfolio.services.menu_service import MenuService
from linkfolio.services.page_service import BlockService, PageService, slugify
from linkfolio.services.social_service import menu_socials, profile_socials


@pytest.fixture
def link_service(db_session, usage):
    return LinkService(LinkRepository(db_session), usage)


def _link(n):
    return LinkCreate(title=f"Link {n}", url=f"https://example.com/{n}")


def test_link_limit_scenario(link_service, make_user, make_plan, subscribe):
    user = make_user()
    subscribe(user, make_plan("Five", max_links=5))

    created = [link_service.create(user.id, _link(i)) for i in range(5)]
    assert [link.position for link in created] == [0, 1, 2, 3, 4]

    with pytest.raises(PlanLimitExceeded) as exc:
        link_service.create(user.id, _link(5))
    assert "5" in exc.value.message

    link_service.delete(user.id, created[1].id)
    expected_position = link_service.positions.next_position(user_id=user.id)

    retried = link_service.create(user.id, _link(6))
    assert retried.position == expected_position == 5


def test_create_invalidates_snapshot(link_service, usage, make_user):
    user = make_user()
    assert usage.get_limits(user.id).current_links == 0
    link_service.create(user.id, _link(1))
    assert usage.get_limits(user.id).current_links == 1


def test_update_of_foreign_link_is_404(link_service, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    link = link_service.create(alice.id, _link(1))

    with pytest.raises(HTTPException) as exc:
        link_service.update(bob.id, link.id, LinkUpdate(title="mine now"))
    assert exc.value.status_code == 404

    with pytest.raises(HTTPException) as exc:
        link_service.delete(bob.id, link.id)
    assert exc.value.status_code == 404


def test_link_reorder_returns_new_order(link_service, make_user):
    user = make_user()
    a, b, c = (link_service.create(user.id, _link(i)) for i in range(3))
    ordered = link_service.reorder(user.id, [c.id, a.id, b.id])
    assert [link.id for link in ordered] == [c.id, a.id, b.id]


def test_page_slug_generation(db_session, usage, make_user, make_plan, subscribe):
    user = make_user()
    subscribe(user, make_plan())
    pages = PageService(PageRepository(db_session), usage)

    first = pages.create(user.id, PageCreate(title="About Me"))
    second = pages.create(user.id, PageCreate(title="About me!"))
    assert first.slug == "about-me"
    assert second.slug == "about-me-2"
    assert slugify("  ***  ") == "page"


def test_free_plan_allows_one_page(db_session, usage, make_user):
    user = make_user()
    pages = PageService(PageRepository(db_session), usage)
    pages.create(user.id, PageCreate(title="Home"))
    with pytest.raises(PlanLimitExceeded):
        pages.create(user.id, PageCreate(title="Second"))


def test_blocks_are_appended_per_page_and_deleted_with_page(db_session, usage, make_user, make_plan, subscribe):
    user = make_user()
    subscribe(user, make_plan())
    page_repo = PageRepository(db_session)
    pages = PageService(page_repo, usage)
    blocks = BlockService(BlockRepository(db_session), page_repo, usage)

    home = pages.create(user.id, PageCreate(title="Home"))
    other = pages.create(user.id, PageCreate(title="Other"))
    b0 = blocks.create(user.id, home.id, BlockCreate(type="text", content={"text": "hi"}))
    b1 = blocks.create(user.id, home.id, BlockCreate(type="link", content={"url": "https://x.example"}))
    o0 = blocks.create(user.id, other.id, BlockCreate(type="media", content={"src": "https://img.example/a.png"}))
    assert (b0.position, b1.position, o0.position) == (0, 1, 0)
    assert usage.get_limits(user.id).current_blocks == 3

    pages.delete(user.id, home.id)
    assert usage.get_limits(user.id).current_blocks == 1


def test_block_on_foreign_page_is_404(db_session, usage, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    page_repo = PageRepository(db_session)
    page = PageService(page_repo, usage).create(alice.id, PageCreate(title="Home"))
    blocks = BlockService(BlockRepository(db_session), page_repo, usage)

    with pytest.raises(HTTPException) as exc:
        blocks.create(bob.id, page.id, BlockCreate(type="text", content={}))
    assert exc.value.status_code == 404


def test_block_update_changes_type_and_content(db_session, usage, make_user):
    user = make_user()
    page_repo = PageRepository(db_session)
    page = PageService(page_repo, usage).create(user.id, PageCreate(title="Home"))
    blocks = BlockService(BlockRepository(db_session), page_repo, usage)
    block = blocks.create(user.id, page.id, BlockCreate(type="text", content={"text": "hi"}))

    updated = blocks.update(user.id, block.id, BlockUpdate(type="link", content={"url": "https://x.example"}))
    assert updated.type == "link"
    assert updated.content == {"url": "https://x.example"}

    kept = blocks.update(user.id, block.id, BlockUpdate(content={"url": "https://y.example"}))
    assert kept.type == "link"


def test_profile_and_menu_socials_share_quota(db_session, usage, make_user):
    user = make_user()
    profile = profile_socials(db_session, usage)
    menu = menu_socials(db_session, usage)

    profile.create(user.id, SocialCreate(platform="instagram", url="https://instagram.com/a"))
    profile.create(user.id, SocialCreate(platform="x", url="https://x.com/a"))
    menu.create(user.id, SocialCreate(platform="whatsapp", url="https://wa.me/1"))

    with pytest.raises(PlanLimitExceeded):
        profile.create(user.id, SocialCreate(platform="tiktok", url="https://tiktok.com/@a"))
    with pytest.raises(PlanLimitExceeded):
        menu.create(user.id, SocialCreate(platform="facebook", url="https://facebook.com/a"))


def test_menu_builder_requires_flag(db_session, usage, make_user, make_plan, subscribe):
    user = make_user()
    menu = MenuService(MenuRepository(db_session), usage)

    with pytest.raises(HTTPException) as exc:
        menu.create_section(user.id, SectionCreate(name="Drinks"))
    assert exc.value.status_code == 403

    subscribe(user, make_plan("Restaurant", menu_builder_enabled=True))
    usage.invalidate(user.id)
    drinks = menu.create_section(user.id, SectionCreate(name="Drinks"))
    food = menu.create_section(user.id, SectionCreate(name="Food"))
    assert (drinks.position, food.position) == (0, 1)

    tea = menu.create_product(user.id, ProductCreate(section_id=drinks.id, name="Tea", price=20))
    coffee = menu.create_product(user.id, ProductCreate(section_id=drinks.id, name="Coffee", price=30))
    rice = menu.create_product(user.id, ProductCreate(section_id=food.id, name="Rice", price=80))
    assert (tea.position, coffee.position, rice.position) == (0, 1, 0)

    reordered = menu.reorder_products(user.id, drinks.id, [coffee.id, tea.id])
    assert [p.id for p in reordered] == [coffee.id, tea.id]
