"""
Short identifier generation.
"""

import secrets
import string

from sqlalchemy.orm import Session

from shortlink_app.exceptions import ShortCodeGenerationError
from shortlink_app.models.url import URL


# URL-safe alphabet: 64 symbols, matches the redirect route's id pattern
ALPHABET = string.ascii_letters + string.digits + "_-"


class RandomShortCodeGenerator:
    """
    Random identifier generation with collision checking.

    Draws from a cryptographically secure source and checks the database
    before handing the code out. The unique index on `urls.short` still
    has the final word (see URLService.create_short_url).

    Pros: Unpredictable, no coordination between app instances
    Cons: One lookup per attempt
    """

    def __init__(self, length: int = 8, max_retries: int = 5):
        self.length = length
        self.max_retries = max_retries

    def generate(self, db_session: Session) -> str:
        """Generate a random short code that isn't taken yet"""
        for _ in range(self.max_retries):
            short_code = self.random_code()

            if not db_session.query(URL.id).filter(URL.short == short_code).first():
                return short_code

        raise ShortCodeGenerationError(
            f"Could not generate unique short code after {self.max_retries} attempts"
        )

    def random_code(self) -> str:
        return "".join(secrets.choice(ALPHABET) for _ in range(self.length))
