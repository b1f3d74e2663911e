# Import all models so create_all() and Alembic can detect them
from linkfolio.models.user import User
from linkfolio.models.link import Link
from linkfolio.models.social import Social, MenuSocial
from linkfolio.models.page import Page, Block
from linkfolio.models.menu import MenuSection, MenuProduct
from linkfolio.models.team import Team, TeamMember, TeamInvite
from linkfolio.models.plan import PricingPlan
from linkfolio.models.subscription import UserSubscription
from linkfolio.models.payment import Payment
from linkfolio.models.affiliate import Affiliate, AffiliateReferral, PromoCode
from linkfolio.models.admin_user import AdminUser

__all__ = [
    "User", "Link", "Social", "MenuSocial", "Page", "Block", "MenuSection", "MenuProduct",
    "Team", "TeamMember", "TeamInvite", "PricingPlan", "UserSubscription", "Payment",
    "Affiliate", "AffiliateReferral", "PromoCode", "AdminUser",
]
