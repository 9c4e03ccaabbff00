"""Walk local directories and GitHub repositories, passing each file to a callback."""