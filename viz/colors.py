BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
GREY = (130, 130, 130)
DARK_GREY = (60, 60, 60)
AMBER = (255, 191, 0)
CYAN = (0, 220, 230)
GREEN = (40, 200, 90)
