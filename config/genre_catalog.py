"""Starter genres and movies for a fresh database.

This is a small demo catalogue. In production, import from a movie metadata provider.
"""

GENRES = [
    {"name": "Action", "description": "Chases, fights and explosions"},
    {"name": "Adventure", "description": "Journeys and quests"},
    {"name": "Animation", "description": "Animated features"},
    {"name": "Comedy", "description": "Made to make you laugh"},
    {"name": "Crime", "description": "Heists, detectives and the underworld"},
    {"name": "Drama", "description": "Character-driven stories"},
    {"name": "Fantasy", "description": "Magic and other worlds"},
    {"name": "Horror", "description": "Made to scare"},
    {"name": "Romance", "description": "Love stories"},
    {"name": "Science Fiction", "description": "Space, time and technology"},
    {"name": "Thriller", "description": "Suspense and tension"},
]

MOVIES = [
    {
        "title": "The Matrix",
        "year": 1999,
        "duration": 136,
        "rating": 8.7,
        "director": "Lana Wachowski, Lilly Wachowski",
        "overview": "A hacker learns that reality is a simulation and joins the rebellion against its machine overlords.",
        "genres": ["Action", "Science Fiction"],
    },
    {
        "title": "Spirited Away",
        "year": 2001,
        "duration": 125,
        "rating": 8.6,
        "director": "Hayao Miyazaki",
        "overview": "A girl wanders into a world of spirits and must work in a bathhouse to free her parents.",
        "genres": ["Animation", "Fantasy", "Adventure"],
    },
    {
        "title": "Parasite",
        "year": 2019,
        "duration": 132,
        "rating": 8.5,
        "director": "Bong Joon-ho",
        "overview": "A poor family schemes its way into the household of a wealthy one.",
        "genres": ["Drama", "Thriller", "Comedy"],
    },
    {
        "title": "The Godfather",
        "year": 1972,
        "duration": 175,
        "rating": 9.2,
        "director": "Francis Ford Coppola",
        "overview": "The aging patriarch of a crime dynasty transfers control to his reluctant son.",
        "genres": ["Crime", "Drama"],
    },
    {
        "title": "Mad Max: Fury Road",
        "year": 2015,
        "duration": 120,
        "rating": 8.1,
        "director": "George Miller",
        "overview": "In a desert wasteland, a drifter and a rebel warrior flee a tyrant across the sands.",
        "genres": ["Action", "Adventure", "Science Fiction"],
    },
    {
        "title": "Amélie",
        "year": 2001,
        "duration": 122,
        "rating": 8.3,
        "director": "Jean-Pierre Jeunet",
        "overview": "A shy waitress in Montmartre decides to change the lives of those around her.",
        "genres": ["Comedy", "Romance"],
    },
    {
        "title": "Get Out",
        "year": 2017,
        "duration": 104,
        "rating": 7.8,
        "director": "Jordan Peele",
        "overview": "A weekend visit to his girlfriend's family turns into a nightmare.",
        "genres": ["Horror", "Thriller"],
    },
    {
        "title": "Interstellar",
        "year": 2014,
        "duration": 169,
        "rating": 8.7,
        "director": "Christopher Nolan",
        "overview": "Explorers travel through a wormhole in search of a new home for humanity.",
        "genres": ["Adventure", "Drama", "Science Fiction"],
    },
    {
        "title": "Before Sunrise",
        "year": 1995,
        "duration": 101,
        "rating": 8.1,
        "director": "Richard Linklater",
        "overview": "Two strangers meet on a train and spend one night walking through Vienna.",
        "genres": ["Drama", "Romance"],
    },
    {
        "title": "The Grand Budapest Hotel",
        "year": 2014,
        "duration": 99,
        "rating": 8.1,
        "director": "Wes Anderson",
        "overview": "A legendary concierge and his lobby boy are caught up in the theft of a priceless painting.",
        "genres": ["Comedy", "Adventure", "Crime"],
    },
    {
        "title": "Alien",
        "year": 1979,
        "duration": 117,
        "rating": 8.5,
        "director": "Ridley Scott",
        "overview": "The crew of a commercial spacecraft encounters a deadly lifeform.",
        "genres": ["Horror", "Science Fiction"],
    },
    {
        "title": "Heat",
        "year": 1995,
        "duration": 170,
        "rating": 8.3,
        "director": "Michael Mann",
        "overview": "A detective hunts a crew of professional thieves across Los Angeles.",
        "genres": ["Action", "Crime", "Thriller"],
    },
]
