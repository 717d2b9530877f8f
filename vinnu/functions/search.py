# Playlist search: filter-then-sort pass over a playlist collection

SORT_KEYS = {
    'newest': (lambda p: p.created_at, True),
    'oldest': (lambda p: p.created_at, False),
    'most-liked': (lambda p: p.likes_count, True),
    'most-viewed': (lambda p: p.views or 0, True),
    'most-clicked': (lambda p: p.clicks or 0, True),
}
DEFAULT_SORT = 'newest'


def _matches_query(playlist, needle):
    if needle in (playlist.title or '').lower():
        return True
    for tag in playlist.tags or []:
        if needle in str(tag.get('text', '')).lower():
            return True
    owner = playlist.owner
    return owner is not None and needle in owner.username.lower()


def search_playlists(playlists, query=None, genre=None, provider=None, sort_by=None):
    # playlists must arrive in storage order; sorted() is stable, so ties keep it
    needle = (query or '').strip().lower()
    genre = (genre or '').strip()
    provider = (provider or '').strip()

    results = []
    for playlist in playlists:
        if needle and not _matches_query(playlist, needle):
            continue
        if genre and genre != 'all' and genre not in (playlist.genres or []):
            continue
        if provider and provider != 'all' and playlist.provider != provider:
            continue
        results.append(playlist)

    key, reverse = SORT_KEYS.get(sort_by or DEFAULT_SORT, SORT_KEYS[DEFAULT_SORT])
    return sorted(results, key=key, reverse=reverse)
