from pydantic import BaseModel
from typing import List

from linkfolio.schemas.link import LinkResponse
from linkfolio.schemas.page import PageWithBlocks
from linkfolio.schemas.social import SocialResponse
from linkfolio.schemas.user import PublicUserResponse


class PublicProfileResponse(BaseModel):
    user: PublicUserResponse
    links: List[LinkResponse]
    socials: List[SocialResponse]
    pages: List[PageWithBlocks]
