# ======================= KEY-VALUE STORE ==========================

# One row per durable key: the answer-history blob and one row per
# (belt, category) session. Values are JSON text.
kv_schema = '''
    CREATE TABLE IF NOT EXISTS kv_store (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
'''
