"""
Administrative data reset
"""

import logging
from typing import Dict

from pymongo.database import Database

from stemforum.services.database import ARTICLES, COMMENTS

logger = logging.getLogger(__name__)


def reset_all_data(db: Database, purge: bool = False) -> Dict[str, int]:
    """
    Zero every article's counters and delete every comment.

    With ``purge`` the article documents are deleted instead of zeroed; they
    are recreated lazily on the next stats/view/like request.
    """
    if purge:
        articles = db[ARTICLES].delete_many({}).deleted_count
        logger.info(f"Deleted {articles} article records")
    else:
        articles = db[ARTICLES].update_many(
            {}, {"$set": {"views": 0, "likes": []}}
        ).modified_count
        logger.info(f"Reset counters on {articles} article records")

    comments = db[COMMENTS].delete_many({}).deleted_count
    logger.info(f"Deleted {comments} comment records")
    return {"articles": articles, "comments": comments}
