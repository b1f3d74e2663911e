from fastapi import APIRouter

from linkfolio.api.v1.routes import (
    admin,
    affiliates,
    auth,
    invites,
    links,
    menu,
    pages,
    payments,
    promo_codes,
    public,
    socials,
    teams,
)

router = APIRouter()
router.include_router(auth.router, prefix="/auth")
router.include_router(links.router, prefix="/links")
router.include_router(pages.router, prefix="/pages")
router.include_router(socials.router, prefix="/socials")
router.include_router(menu.router, prefix="/menu")
router.include_router(teams.router, prefix="/teams")
router.include_router(invites.router, prefix="/invites")
router.include_router(payments.router, prefix="/payments")
router.include_router(affiliates.router, prefix="/affiliates")
router.include_router(promo_codes.router, prefix="/promo-codes")
router.include_router(admin.router, prefix="/admin")
router.include_router(affiliates.admin_router, prefix="/admin/affiliates")
router.include_router(promo_codes.admin_router, prefix="/admin/promo-codes")
router.include_router(public.router, prefix="/public")
