from storecms.models.cms import (  # noqa: F401
    CONTENT_STATUSES,
    POST_SETTINGS_ID,
    Category,
    Page,
    Post,
    PostRevision,
    PostSettings,
    Tag,
    post_category_map,
    post_tag_map,
)
