# happydb/messages/topic_messages.py

BRANCH_STARTED = "Topic branch '{name}': {count} documents selected."
BRANCH_COMPLETED = "Topic branch '{name}' completed (seed={seed}, log-likelihood={ll:.2f})."
BRANCH_FAILED = "Topic branch '{name}' aborted at stage '{stage}': {error}"
TFIDF_COMPLETED = "TF-IDF '{name}' scored {groups} groups, {rows} rows."
