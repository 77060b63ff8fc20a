import os

# --- Content store (MongoDB) ---
DATABASE_URL = os.getenv("DATABASE_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "medium_blog")
DATABASE_TIMEOUT_MS = int(os.getenv("DATABASE_TIMEOUT_MS", "5000"))

POSTS_COLLECTION = "post"
AUTHORS_COLLECTION = "author"
COMMENTS_COLLECTION = "comment"

# --- Google Cloud Storage (post and author images) ---
GCP_PROJECT_ID = os.getenv("GCP_PROJECT_ID") or None
IMAGES_BUCKET_NAME = os.getenv("IMAGES_BUCKET_NAME", "medium-blog-images")

# --- HTTP ---
ALLOWED_HOSTS = [
    host.strip()
    for host in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")
    if host.strip()
]

# Bounded wait for a single comment write before it is reported as failed
COMMENT_WRITE_TIMEOUT_SECONDS = float(os.getenv("COMMENT_WRITE_TIMEOUT_SECONDS", "10"))

# "blocking": unknown slugs are looked up on demand; "none": unknown slugs are 404
PATHS_FALLBACK = os.getenv("PATHS_FALLBACK", "blocking")
