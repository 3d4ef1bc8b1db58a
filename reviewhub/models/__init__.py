"""SQLAlchemy ORM models.

Models represent database tables:
- profiles: Users of the directory (consumers, business owners, admins)
- businesses / business_images: Directory listings and their pictures
- categories / subcategories (+ join tables): Listing taxonomy
- reviews: Ratings submitted by users against businesses
- featured_subcategories: Admin-curated best-in-category sections
"""

from reviewhub.models.profile import Profile
from reviewhub.models.business import Business, BusinessImage
from reviewhub.models.category import BusinessCategory, BusinessSubcategory, Category, Subcategory
from reviewhub.models.review import Review
from reviewhub.models.featured_subcategory import FeaturedSubcategory

__all__ = [
    "Profile",
    "Business",
    "BusinessImage",
    "Category",
    "Subcategory",
    "BusinessCategory",
    "BusinessSubcategory",
    "Review",
    "FeaturedSubcategory",
]
