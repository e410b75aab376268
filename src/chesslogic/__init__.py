"""chesslogic: chess rules engine (``core``) and game session layer (``game``)."""
