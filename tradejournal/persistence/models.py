"""Database schema definitions."""

SCHEMA = [
    # Trading platforms (exchanges, brokers, wallets)
    """
    CREATE TABLE IF NOT EXISTS platforms (
        platform_id TEXT PRIMARY KEY,
        owner_id TEXT NOT NULL,
        name TEXT NOT NULL,
        type TEXT NOT NULL,
        currency TEXT NOT NULL DEFAULT 'USD',
        created_at REAL NOT NULL
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_platforms_owner
    ON platforms(owner_id, created_at DESC)
    """,
    # Trades
    """
    CREATE TABLE IF NOT EXISTS trades (
        trade_id TEXT PRIMARY KEY,
        owner_id TEXT NOT NULL,
        platform_id TEXT NOT NULL,
        journal_type TEXT NOT NULL,
        trade_type TEXT NOT NULL,
        direction TEXT NOT NULL,
        currency TEXT NOT NULL,
        symbol TEXT NOT NULL,
        entry_price REAL NOT NULL,
        size REAL NOT NULL,
        leverage REAL,
        fee REAL NOT NULL DEFAULT 0,
        tp1 REAL,
        tp2 REAL,
        tp3 REAL,
        tp4 REAL,
        tp5 REAL,
        stop_loss REAL,
        status TEXT NOT NULL,
        exit_price REAL,
        pnl REAL,
        pnl_percentage REAL,
        entry_date REAL NOT NULL,
        exit_date REAL,
        notes TEXT,
        tags TEXT,
        created_at REAL NOT NULL,
        updated_at REAL NOT NULL
    )
    """,
    # Trade list queries (owner + journal, newest entry first)
    """
    CREATE INDEX IF NOT EXISTS idx_trades_owner_journal
    ON trades(owner_id, journal_type, entry_date DESC)
    """,
    # Daily recompute scans by exit date
    """
    CREATE INDEX IF NOT EXISTS idx_trades_owner_exit
    ON trades(owner_id, journal_type, exit_date)
    """,
    # Daily summaries for the calendar view
    """
    CREATE TABLE IF NOT EXISTS daily_summaries (
        owner_id TEXT NOT NULL,
        day REAL NOT NULL,
        journal_type TEXT NOT NULL,
        total_pnl REAL NOT NULL,
        total_trades INTEGER NOT NULL,
        winning_trades INTEGER NOT NULL,
        losing_trades INTEGER NOT NULL,
        updated_at REAL NOT NULL,
        PRIMARY KEY (owner_id, day, journal_type)
    )
    """,
    # Deposits, withdrawals and transfers behind platform balances
    """
    CREATE TABLE IF NOT EXISTS transactions (
        transaction_id TEXT PRIMARY KEY,
        owner_id TEXT NOT NULL,
        type TEXT NOT NULL,
        platform_id TEXT NOT NULL,
        to_platform_id TEXT,
        amount REAL NOT NULL,
        currency TEXT NOT NULL,
        description TEXT,
        date REAL NOT NULL,
        created_at REAL NOT NULL
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_transactions_owner_date
    ON transactions(owner_id, date DESC)
    """,
]
