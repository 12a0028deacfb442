"""Interactive selection, clean-build, diff and edit menus."""