"""Discord REST integration.

Reads guild counts, bot identity and the bot's guild list from the Discord
Bot API (REST, v10) using the bot token from the application settings.

Modules:
    config  - API base URLs and the online-estimate ratio
    _http   - single-request dispatch and failure mapping
    client  - DiscordClient, one method per upstream endpoint
    proxy   - StatusProxy, the always-200 operations behind the JSON routes

Presence (who is online) needs a Gateway WebSocket connection and is not
read; the online count is an estimate derived from the member count.
"""
