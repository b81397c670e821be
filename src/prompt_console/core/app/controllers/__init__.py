# Controllers package
