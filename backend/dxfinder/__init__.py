"""DX Finder – watch for the closest maimai DX cabinet to a fixed spot."""
