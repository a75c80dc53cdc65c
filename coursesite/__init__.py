"""Course site builder: course data + HTML template -> static course pages."""
