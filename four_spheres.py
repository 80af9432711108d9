from ExampleSceneDef import FourSpheresExample

if __name__ == '__main__':
    FourSpheresExample().render("out.ppm", verbose=True)
