"""Fetching PKGBUILDs and their git repositories from the AUR and the official repositories."""