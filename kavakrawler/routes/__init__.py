# Blueprints: auth, bars, user, places
